from __future__ import annotations

KILO_VERSION = "0.8.0"
KILO_TAB_STOP = 8
KILO_QUIT_TIMES = 2
KILO_MESSAGE_TIMEOUT = 5

# Syntax highlight types.
HL_NORMAL = 0
HL_COMMENT = 1
HL_MLCOMMENT = 2
HL_KEYWORD1 = 3
HL_KEYWORD2 = 4
HL_STRING = 5
HL_NUMBER = 6
HL_MATCH = 7

HL_HIGHLIGHT_STRINGS = 1 << 0
HL_HIGHLIGHT_NUMBERS = 1 << 1

SEPARATORS = ",.()+-/*=~%<>[];"
WHITESPACE = " \t\n\v\f\r"


def ctrl(ch: str) -> int:
    return ord(ch.upper()) & 0x1F


# Key actions.
CTRL_F = ctrl("f")
CTRL_H = ctrl("h")
TAB = 9
CTRL_L = ctrl("l")
ENTER = 13
CTRL_Q = ctrl("q")
CTRL_S = ctrl("s")
ESC = 27
BACKSPACE = 127

ARROW_LEFT = 1000
ARROW_RIGHT = 1001
ARROW_UP = 1002
ARROW_DOWN = 1003
DEL_KEY = 1004
HOME_KEY = 1005
END_KEY = 1006
PAGE_UP = 1007
PAGE_DOWN = 1008

CSI_SIMPLE_MAP = {
    ord("A"): ARROW_UP,
    ord("B"): ARROW_DOWN,
    ord("C"): ARROW_RIGHT,
    ord("D"): ARROW_LEFT,
    ord("H"): HOME_KEY,
    ord("F"): END_KEY,
}
CSI_TILDE_MAP = {
    ord("1"): HOME_KEY,
    ord("3"): DEL_KEY,
    ord("4"): END_KEY,
    ord("5"): PAGE_UP,
    ord("6"): PAGE_DOWN,
    ord("7"): HOME_KEY,
    ord("8"): END_KEY,
}
SS3_SIMPLE_MAP = {
    ord("H"): HOME_KEY,
    ord("F"): END_KEY,
}

ANSI_HIDE_CURSOR = "\x1b[?25l"
ANSI_SHOW_CURSOR = "\x1b[?25h"
ANSI_CURSOR_HOME = "\x1b[H"
ANSI_CLEAR_LINE = "\x1b[K"
ANSI_CLEAR_SCREEN = "\x1b[2J"
ANSI_INVERT_ON = "\x1b[7m"
ANSI_INVERT_OFF = "\x1b[m"
ANSI_DEFAULT_COLOR = "\x1b[39m"

C_HL_EXTENSIONS = (".c", ".h", ".cpp", ".hpp", ".cc")
C_HL_KEYWORDS = (
    # C keywords.
    "auto",
    "break",
    "case",
    "continue",
    "default",
    "do",
    "else",
    "enum",
    "extern",
    "for",
    "goto",
    "if",
    "register",
    "return",
    "sizeof",
    "static",
    "struct",
    "switch",
    "typedef",
    "union",
    "volatile",
    "while",
    "NULL",
    # C++ keywords.
    "alignas",
    "alignof",
    "and",
    "and_eq",
    "asm",
    "bitand",
    "bitor",
    "class",
    "compl",
    "constexpr",
    "const_cast",
    "decltype",
    "delete",
    "dynamic_cast",
    "explicit",
    "export",
    "false",
    "friend",
    "inline",
    "mutable",
    "namespace",
    "new",
    "noexcept",
    "not",
    "not_eq",
    "nullptr",
    "operator",
    "or",
    "or_eq",
    "private",
    "protected",
    "public",
    "reinterpret_cast",
    "static_assert",
    "static_cast",
    "template",
    "this",
    "thread_local",
    "throw",
    "true",
    "try",
    "typeid",
    "typename",
    "virtual",
    "xor",
    "xor_eq",
    # C types (secondary class).
    "int|",
    "long|",
    "double|",
    "float|",
    "char|",
    "unsigned|",
    "signed|",
    "void|",
    "short|",
    "const|",
    "bool|",
)

PY_HL_EXTENSIONS = (".py", ".pyw")
PY_HL_KEYWORDS = (
    "and",
    "as",
    "assert",
    "async",
    "await",
    "break",
    "class",
    "continue",
    "def",
    "del",
    "elif",
    "else",
    "except",
    "finally",
    "for",
    "from",
    "global",
    "if",
    "import",
    "in",
    "is",
    "lambda",
    "nonlocal",
    "not",
    "or",
    "pass",
    "raise",
    "return",
    "try",
    "while",
    "with",
    "yield",
    # Builtin constants and types (secondary class).
    "None|",
    "True|",
    "False|",
    "self|",
    "int|",
    "str|",
    "bytes|",
    "float|",
    "bool|",
    "list|",
    "dict|",
    "set|",
    "tuple|",
)
