from __future__ import annotations
import argparse, csv, logging, pathlib, sys
from . import notes, timesigs
from .config import ConfigError, load_config, note_options, timesig_options

def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="midinotes", description="MIDI file -> note list / time signature map")
    p.add_argument("--config", dest="config", default=None, help="YAML config (defaults applied if omitted)")
    # same option after the subcommand; SUPPRESS keeps a value given before it
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", dest="config", default=argparse.SUPPRESS, help="YAML config (defaults applied if omitted)")
    sub = p.add_subparsers(dest="command", required=True)

    pn = sub.add_parser("notes", parents=[common], help="one CSV row per note")
    pn.add_argument("infile", help="Input MIDI file (.mid)")
    pn.add_argument("--overlaps", default=None, help="queue (FIFO) or stack (LIFO)")
    pn.add_argument("--warnings", action="store_true", help="Log orphan/overlapping notes")

    pt = sub.add_parser("timesigs", parents=[common], help="one CSV row per time signature interval")
    pt.add_argument("infile", help="Input MIDI file (.mid)")
    pt.add_argument("--unit", default=None, help="ticks, wholes or seconds")
    pt.add_argument("--upbeat", default=None, help="Pick-up length in the chosen unit, e.g. 1/8")
    return p

def main(argv=None):
    args = _parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="[%(name)s] %(levelname)s: %(message)s")

    # command line beats config file
    cfg = load_config(args.config)
    if args.command == "notes":
        if args.overlaps is not None:
            cfg["notes"]["overlaps"] = args.overlaps
        if args.warnings:
            cfg["notes"]["warnings"] = True
    else:
        if args.unit is not None:
            cfg["timesigs"]["unit"] = args.unit
        if args.upbeat is not None:
            cfg["timesigs"]["upbeat"] = args.upbeat

    try:
        opts = note_options(cfg) if args.command == "notes" else timesig_options(cfg)
    except ConfigError as e:
        print(f"[cli] ERROR: {e}", file=sys.stderr)
        sys.exit(2)

    in_path = pathlib.Path(args.infile).expanduser().resolve()
    if not in_path.exists():
        print(f"[cli] ERROR: Input not found: {in_path}", file=sys.stderr)
        sys.exit(1)
    print(f"[cli] infile = {in_path}", file=sys.stderr)

    out = csv.writer(sys.stdout)
    if args.command == "notes":
        rows = notes.midifile_notes(in_path, **opts)
        out.writerow(notes.NOTE_COLUMNS)
        for n in rows:
            out.writerow([str(v) for v in n.as_row()])
        print(f"[cli] Done. notes={len(rows)}", file=sys.stderr)
    else:
        tsmap = timesigs.midifile_timesigs(in_path, **opts)
        out.writerow(("start", "end", "signature"))
        for start, end, sig in tsmap.intervals():
            out.writerow((str(start), str(end), str(sig)))
        print(f"[cli] Done. intervals={len(tsmap)} unit={opts['unit']}", file=sys.stderr)

if __name__ == "__main__":
    main()
