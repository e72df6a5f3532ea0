"""Protocol layer: raw transfer, text lines, and length-prefixed frames."""

from .raw import NEWLINE, read_exact, read_until, write_bytes
from .lines import parse_text, print_line, read_line
from .framing import build_frame, build_header, parse_frame, parse_header, read, write
