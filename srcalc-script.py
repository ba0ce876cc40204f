import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

import algorithm
from mods import Mod, mods_str, parse_mods


def collect_attributes(folder_path, mods):
    rows = []
    for file in sorted(Path(folder_path).iterdir()):
        if file.suffix != ".osu":
            continue
        try:
            attributes = algorithm.calculate_attributes(file, mods)
        except (OSError, ValueError) as e:
            print(f"Error: could not process {file.name}: {e}")
            continue
        print(f"({mods_str(mods)}) {file.stem} | {attributes.star_rating:.4f}")
        row = attributes._asdict()
        row["mods"] = mods_str(mods)
        row["file"] = file.stem
        rows.append(row)
    return pd.DataFrame(rows)


def main():
    parser = argparse.ArgumentParser(description="Calculate touch device SR for osu!standard beatmaps.")
    parser.add_argument("folder_path", nargs='?', default=Path.cwd(), type=Path, help='Path to the folder containing .osu files.')
    parser.add_argument("--mod", "-M", type=str, action="append", default=[],
                        help=f'Mods to apply, repeatable or combined (e.g. -M DT -M HR or -M DTHR). One of {", ".join(m.value for m in Mod)}.')
    parser.add_argument("--csv", type=Path, help="Also write every difficulty attribute to this CSV file.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log skill values per beatmap.")
    parser.add_argument("--version", "-V", action="store_true", help="Show build version (build time) and exit.")
    args = parser.parse_args()

    def resource_path(relative_path: str) -> Path:
        base_path = Path(getattr(sys, '_MEIPASS', Path(__file__).parent))
        return base_path / relative_path

    build_time_file = resource_path("build_time")
    if build_time_file.exists():
        version_str = f" (algorithm version: {build_time_file.read_text(encoding='utf-8').strip()})"
    else:
        version_str = ""
    credit_str = f"touch-sr{version_str}"

    if args.version:
        print(credit_str)
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    folder_path = args.folder_path
    if not folder_path.is_dir():
        print(f"Error: {folder_path} is not a valid directory.")
        sys.exit(1)

    try:
        mods = parse_mods(args.mod)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(credit_str)
    print(f"Dir: {folder_path}, Mod: {mods_str(mods)}\n")

    while True:
        results = collect_attributes(folder_path, mods)
        if args.csv is not None and not results.empty:
            results.to_csv(args.csv, index=False)
            print(f"Attributes written to {args.csv}")
        try:
            input("SR calculation completed. Press Enter to run again or 'Ctrl+C' to exit.")
            print()
        except KeyboardInterrupt:
            sys.exit(0)


if __name__ == "__main__":
    main()
