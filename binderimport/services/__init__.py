"""
BinderImport services.

Resolution, preview, batched commit and session logic of the import pipeline.
"""

from binderimport.services.batch_import import (
    BATCH_FAILED_MESSAGE,
    import_collection_batched,
    import_wishlist_batched,
    run_batched_import,
    split_batches,
)
from binderimport.services.binder_api import (
    BinderApiClient,
    get_binder_client,
    reset_binder_client,
)
from binderimport.services.preview import (
    build_preview,
    preview_rows_to_import_rows,
    preview_rows_to_wishlist_import_rows,
    reconcile,
)
from binderimport.services.resolver import CardResolver, resolve_rows, unique_card_names
from binderimport.services.session import ImportSession
from binderimport.services.text_import import (
    build_text_import,
    import_text,
    import_text_remote,
    text_entries_to_import_rows,
    text_entries_to_wishlist_import_rows,
)
from binderimport.services.url_sources import (
    detect_url_source,
    extract_deck_id,
    import_deck_url,
    is_url_supported,
)

__all__ = [
    "BATCH_FAILED_MESSAGE",
    "BinderApiClient",
    "CardResolver",
    "ImportSession",
    "build_preview",
    "build_text_import",
    "detect_url_source",
    "extract_deck_id",
    "get_binder_client",
    "import_collection_batched",
    "import_deck_url",
    "import_text",
    "import_text_remote",
    "import_wishlist_batched",
    "is_url_supported",
    "preview_rows_to_import_rows",
    "preview_rows_to_wishlist_import_rows",
    "reconcile",
    "reset_binder_client",
    "resolve_rows",
    "run_batched_import",
    "split_batches",
    "text_entries_to_import_rows",
    "text_entries_to_wishlist_import_rows",
    "unique_card_names",
]
