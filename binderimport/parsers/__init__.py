from binderimport.parsers.csv_import import (
    COLLECTION_CSV_TEMPLATE,
    WISHLIST_CSV_TEMPLATE,
    check_upload,
    parse_collection_csv,
    parse_collection_csv_file,
    parse_wishlist_csv,
    parse_wishlist_csv_file,
)
from binderimport.parsers.decklist import (
    decklist_to_collection_rows,
    decklist_to_wishlist_rows,
    detect_format,
    parse_decklist,
    parse_decklist_line,
)

__all__ = [
    "COLLECTION_CSV_TEMPLATE",
    "WISHLIST_CSV_TEMPLATE",
    "check_upload",
    "decklist_to_collection_rows",
    "decklist_to_wishlist_rows",
    "detect_format",
    "parse_collection_csv",
    "parse_collection_csv_file",
    "parse_decklist",
    "parse_decklist_line",
    "parse_wishlist_csv",
    "parse_wishlist_csv_file",
]
