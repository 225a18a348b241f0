# Where: tools/local_invoke/core/logging.py
# What: Colored terminal output helpers for the local invoke CLI.
# Why: Keep user-facing messages consistent across commands.
import sys


# ANSI Escape Codes for Colors
class Color:
    BLUE = "\033[94m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    CYAN = "\033[96m"
    GREY = "\033[90m"
    BOLD = "\033[1m"
    END = "\033[0m"


def info(msg: str):
    print(f"{Color.CYAN}ℹ {msg}{Color.END}")


def success(msg: str):
    print(f"{Color.GREEN}✅ {msg}{Color.END}")


def warning(msg: str):
    print(f"{Color.YELLOW}⚠️ {msg}{Color.END}", file=sys.stderr)


def error(msg: str):
    print(f"{Color.RED}❌ {msg}{Color.END}", file=sys.stderr)


def hint(msg: str):
    print(f"{Color.GREY}   Hint: {msg}{Color.END}", file=sys.stderr)


def highlight(msg: str) -> str:
    return f"{Color.BOLD}{msg}{Color.END}"


def field(label: str, value) -> None:
    print(f"  {Color.BOLD}{label:<12}{Color.END} {value}")
