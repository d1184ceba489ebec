import os
import sys

# Add the project root directory to the python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from poi_explorer.mapping.svg_paths import main

if __name__ == "__main__":
    main()
