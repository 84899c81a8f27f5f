# This is a simple example program to show how to use PyCdreader to open up an
# existing ISO passed on the command-line, and print out all of the file names
# at the root of the ISO.

# Import standard python modules.
import sys

# Import pycdreader itself.
import pycdreader

# Check that there are enough command-line arguments.
if len(sys.argv) != 2:
    print('Usage: %s <iso>' % (sys.argv[0]))
    sys.exit(1)

# Create a new PyCdreader object.
iso = pycdreader.PyCdreader()

# Open up the ISO.  This reads the Primary Volume Descriptor, which tells
# PyCdreader the logical block size and where the path table is.
iso.open(sys.argv[1])

# Now iterate through each of the entries at the root of the ISO, printing out
# their names.  The '.' and '..' entries are included.
for child in iso.list_children('/'):
    print(child.file_identifier())

# Close the ISO object.  After this call, the PyCdreader object has forgotten
# everything about the previous ISO, and can be re-used.
iso.close()
