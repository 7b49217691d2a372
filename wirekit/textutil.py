"""Small text helpers used when rendering capture summaries."""


def add_tabs(text: str) -> str:
    """Indent every line of ``text`` by one tab.

    A newline among the last two characters of the text is not followed by a
    tab, so a trailing newline stays a plain line ending.
    """
    if len(text) < 2:
        return "\t" + text.replace("\n", "\n\t")
    head, tail = text[:-2], text[-2:]
    return "\t" + head.replace("\n", "\n\t") + tail