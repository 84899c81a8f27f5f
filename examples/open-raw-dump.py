# This is a example program to show how to use PyCdreader to read a raw CD
# dump (a .bin file with 2352-byte sectors), print every directory on it, and
# extract the contents of one file.

# Import standard python modules.
import sys
from io import BytesIO

# Import pycdreader itself.
import pycdreader

# Check that there are enough command-line arguments.
if len(sys.argv) != 3:
    print('Usage: %s <bin> <file in root directory>' % (sys.argv[0]))
    sys.exit(1)

# Create a new PyCdreader object.
iso = pycdreader.PyCdreader()

# Open up the dump, telling PyCdreader how large each physical sector is.
iso.open(sys.argv[1], raw_sector_size=2352)

# The path table lists every directory on the ISO, with its full path.
for ptr in iso.read_path_table():
    print('/' + ptr.path)

# Find the requested file at the root, and read its data into memory.
for child in iso.list_children('/'):
    if child.file_identifier() == sys.argv[2]:
        extracted = BytesIO()
        iso.get_file_from_iso_fp(extracted, child)
        print(extracted.getvalue())

# Close the ISO object.
iso.close()
