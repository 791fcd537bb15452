"""Quick-reply option extraction from assistant answers.

The recommendation prompt asks the model for exactly four numbered options
(``### Option 1: Title`` followed by a short description). Model output is
loose prose, so headers are matched leniently: headings, bold markers, the
word "Option" and the separator style all vary between answers.

Only call this on finished messages; partial text produces unstable menus.
"""

import re

from cirkit.domain.chat.types import SuggestionOption

MAX_OPTIONS = 4

_HEADER_RE = re.compile(
    r"^\s*(?:#{1,6}\s*)?(?:\*\*)?\s*(?:option\s*)?(\d)\s*[.):]\s*(?:\*\*)?\s*(.*)$",
    re.IGNORECASE,
)
_NUMBERED_ITEM_RE = re.compile(r"^\s*(?:#{1,6}\s*)?(?:\*\*)?\s*(?:option\s*)?\d+\s*[.):]", re.IGNORECASE)
_TRAILING_BOLD_RE = re.compile(r"\*+\s*$")
_TRAILING_COLON_RE = re.compile(r":\s*$")


def _clean_title(raw: str) -> str:
    title = _TRAILING_BOLD_RE.sub("", raw)
    title = _TRAILING_COLON_RE.sub("", title)
    return title.strip()


def extract_options(text: str) -> list[SuggestionOption]:
    """Parse up to four numbered options out of ``text``.

    A header line starts a new option; following non-blank lines are appended
    to its ``full_text`` while ``title`` stays the header text. Lines before
    the first header and blank lines are skipped. Note that a body line such
    as ``3. add two resistors`` also matches the header shape and therefore
    starts a new option.
    """
    options: list[SuggestionOption] = []
    current: SuggestionOption | None = None

    for line in text.splitlines():
        match = _HEADER_RE.match(line)
        if match:
            if current is not None:
                options.append(current)
            number = match.group(1)
            title = _clean_title(match.group(2))
            current = SuggestionOption(
                number=number,
                title=title,
                full_text=f"Option {number}: {title}",
            )
            continue

        stripped = line.strip()
        if current is not None and stripped and not _NUMBERED_ITEM_RE.match(stripped):
            current = SuggestionOption(
                number=current.number,
                title=current.title,
                full_text=f"{current.full_text} {stripped}",
            )

    if current is not None:
        options.append(current)

    return options[:MAX_OPTIONS]
