import sys

from neomips.main import main

sys.exit(main())
