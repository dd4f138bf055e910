import os
import sys


# Add the colocated "bin/" dir, as a dir of importable modules

sys.path.insert(0, os.path.join(os.path.split(__file__)[0], os.pardir, "bin"))
