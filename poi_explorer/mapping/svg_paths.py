import argparse
import json
import logging
import os
import sys

from bs4 import BeautifulSoup

from poi_explorer.core.config import settings
from poi_explorer.core.log import setup_logging
from poi_explorer.models import MapPaths

logger = logging.getLogger(__name__)


def extract_map_paths(svg_markup, view_box: str = None) -> MapPaths:
    """
    Collect every <path> that has both an id and path data.
    The viewBox is the fixed frontend window, not the one in the file.
    """
    soup = BeautifulSoup(svg_markup, "xml")
    map_paths = {}
    for el in soup.find_all("path"):
        path_id = el.get("id")
        d = el.get("d")
        if path_id and d:
            map_paths[path_id] = d
    return MapPaths(view_box=view_box or settings.MAP_VIEWBOX, map_paths=map_paths)


def build_map_paths(src: str = None, dst: str = None) -> MapPaths:
    src = src or settings.MAP_SVG_PATH
    dst = dst or settings.MAP_PATHS_JSON_PATH

    with open(src, "rb") as f:
        result = extract_map_paths(f.read())

    out_dir = os.path.dirname(dst)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(dst, "w", encoding="utf-8") as f:
        json.dump(result.model_dump(by_alias=True), f, indent=2, ensure_ascii=False)

    logger.info(f"Wrote {len(result.map_paths)} paths from {src} to {dst}")
    return result


def main(argv=None):
    parser = argparse.ArgumentParser(description="Extract SVG map paths to JSON")
    parser.add_argument("--src", default=settings.MAP_SVG_PATH)
    parser.add_argument("--dst", default=settings.MAP_PATHS_JSON_PATH)
    args = parser.parse_args(argv)

    setup_logging()
    if not os.path.exists(args.src):
        logger.error(f"File {args.src} not found.")
        sys.exit(1)

    build_map_paths(args.src, args.dst)
    print(f"{os.path.basename(args.dst)} generated!")


if __name__ == "__main__":
    main()
