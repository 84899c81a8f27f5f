import io
import setuptools

VERSION='1.0.0'

setuptools.setup(name='pycdreader',
                 version=VERSION,
                 description='Pure python ISO9660 and raw CD image reader',
                 long_description=io.open('README.md', encoding='UTF-8').read(),
                 long_description_content_type='text/markdown',
                 author='Chris Lalancette',
                 author_email='clalancette@gmail.com',
                 license='LGPLv2',
                 classifiers=['Development Status :: 4 - Beta',
                              'Intended Audience :: Developers',
                              'License :: OSI Approved :: GNU Lesser General Public License v2 (LGPLv2)',
                              'Natural Language :: English',
                              'Programming Language :: Python :: 3',
                 ],
                 keywords='iso9660 iso ecma119 cdrom raw bin',
                 packages=['pycdreader'],
                 python_requires='>=3.6',
                 extras_require={'tests': ['pytest']},
                 scripts=['tools/pycdreader-extract-files.py'],
)
