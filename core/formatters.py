# core/formatters.py

# all pure text helpers shared by the serializer and the CLI
# must never import from models!

ID_WIDTH = 10
MARK_WIDTH = 6
COLUMN_TITLES = ("ID", "Name", "Programme", "Mark")

# === generic text formatters ===


def format_banner_text(title: str, width: int = 40) -> str:
    line = "=" * width
    centered_title = f"{title:^{width}}"

    return f"{line}\n{centered_title}\n{line}"


def format_mark(mark: float) -> str:
    return f"{mark:.1f}"


# === fixed-width table rows ===


def format_header_row(name_width: int = 15, programme_width: int = 25) -> str:
    id_title, name_title, programme_title, mark_title = COLUMN_TITLES
    return (
        f"{id_title:<{ID_WIDTH}} {name_title:<{name_width}} "
        f"{programme_title:<{programme_width}} {mark_title:<{MARK_WIDTH}}"
    )


def format_record_row(
    id: int,
    name: str,
    programme: str,
    mark: float,
    name_width: int = 15,
    programme_width: int = 25,
) -> str:
    return (
        f"{id:<{ID_WIDTH}} {name:<{name_width}} "
        f"{programme:<{programme_width}} {format_mark(mark):<{MARK_WIDTH}}"
    )
