from row_schema import FIELDS


COLUMN_SEPARATOR = "\t"
ROW_SEPARATOR = "\n"


class ClipboardCodec:
    """Tab/newline text interchange for rectangular blocks of cells.

    Embedded tabs or newlines inside a value are not escaped; such values do
    not survive a round trip.
    """

    def __init__(self, max_width: int = len(FIELDS)):
        self.max_width = max_width

    def encode(self, rows, rect=None) -> str:
        if rect is None:
            block = [list(row) for row in rows]
        else:
            r0, r1, c0, c1 = rect
            block = [list(row)[c0 : c1 + 1] for row in list(rows)[r0 : r1 + 1]]
        return ROW_SEPARATOR.join(COLUMN_SEPARATOR.join(str(v) for v in row) for row in block)

    def decode(self, text: str, width: int | None = None) -> list[list[str]]:
        if not text:
            return []
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        lines = text.split(ROW_SEPARATOR)
        if lines and lines[-1] == "":
            lines = lines[:-1]
        matrix = [line.split(COLUMN_SEPARATOR) for line in lines]
        if not matrix:
            return []
        if width is None:
            width = max(len(row) for row in matrix)
        width = max(1, min(width, self.max_width))
        return [(row + [""] * (width - len(row)))[:width] for row in matrix]
