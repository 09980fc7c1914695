import sys

from ioweyou.deploy import main

if __name__ == "__main__":
    sys.exit(main())
