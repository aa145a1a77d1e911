"""
Development runner for the spin wheel demo.

Puts 'src' on sys.path so the demo starts from a checkout without installing
the package:

    $ python run.py --wedges 6 --debug
"""
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from spinwheel.app.main import main

if __name__ == "__main__":
    sys.exit(main())
