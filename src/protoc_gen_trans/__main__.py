"""Module entry point for `python -m protoc_gen_trans`."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
