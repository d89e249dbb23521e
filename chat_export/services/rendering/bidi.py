"""
Directional text correction for mixed-script lines.

This is a heuristic, not an implementation of the Unicode bidi algorithm: in a
line that contains Hebrew or Arabic characters, every embedded left-to-right
run (Latin letters, digits and URL-safe punctuation) is wrapped in a
LEFT-TO-RIGHT ISOLATE / POP DIRECTIONAL ISOLATE pair so that it keeps its own
visual order. Lines without right-to-left characters are returned unchanged.
"""

import re

LRI = "\u2066"
PDI = "\u2069"
ISOLATE_CONTROLS = (LRI, PDI)

# Hebrew, Arabic (+ supplement, extended-A) and their presentation forms
RTL_CHARS = re.compile(
    "[\u0590-\u05FF\u0600-\u06FF\u0750-\u077F\u08A0-\u08FF"
    "\uFB1D-\uFB4F\uFB50-\uFDFF\uFE70-\uFEFC]"
)

_LTR_START = "A-Za-z0-9\u00C0-\u024F"
_LTR_BODY = _LTR_START + r"._:/\\\-?=&%#@+~"
LTR_RUN = re.compile(f"[{_LTR_START}][{_LTR_BODY}]*(?:[ \\t]+[{_LTR_START}][{_LTR_BODY}]*)*")


def contains_rtl(text: str) -> bool:
    return bool(RTL_CHARS.search(text))


def isolate_ltr_runs(line: str) -> str:
    """Wrap left-to-right runs of an RTL line in directional isolates."""
    if not contains_rtl(line):
        return line
    return LTR_RUN.sub(lambda m: f"{LRI}{m.group(0)}{PDI}", line)


def strip_isolates(line: str) -> str:
    for control in ISOLATE_CONTROLS:
        line = line.replace(control, "")
    return line
