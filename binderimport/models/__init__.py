from binderimport.models.catalog import ResolveCardsResult, ResolvedCard, ResolvedName
from binderimport.models.condition import (
    CONDITION_RANK,
    CardCondition,
    WishlistPriority,
    condition_label,
    is_condition_acceptable,
    normalize_condition,
    parse_condition,
    parse_priority,
)
from binderimport.models.decklist import (
    DecklistEntry,
    ParsedDecklist,
    TextImportEntry,
    TextImportResult,
    TextImportStats,
    UrlImportResult,
)
from binderimport.models.failure import (
    FailureKind,
    ImportApiError,
    ImportSessionBusyError,
    ImportStateError,
    InvalidOverrideError,
    KnownError,
    UnsupportedUrlError,
)
from binderimport.models.import_result import (
    BatchProgress,
    DuplicateMode,
    ImportResult,
    ImportRow,
    ImportRowError,
    TargetType,
    WishlistDuplicateMode,
    WishlistImportRow,
)
from binderimport.models.preview import (
    NotFound,
    PreviewRow,
    PreviewSession,
    PreviewStats,
    Ready,
    RowError,
    RowStatus,
)
from binderimport.models.rows import CSVParseResult, ParsedRow, ParsedWishlistRow, ParseError

__all__ = [
    "CONDITION_RANK",
    "BatchProgress",
    "CSVParseResult",
    "CardCondition",
    "DecklistEntry",
    "DuplicateMode",
    "FailureKind",
    "ImportApiError",
    "ImportResult",
    "ImportRow",
    "ImportRowError",
    "ImportSessionBusyError",
    "ImportStateError",
    "InvalidOverrideError",
    "KnownError",
    "NotFound",
    "ParseError",
    "ParsedDecklist",
    "ParsedRow",
    "ParsedWishlistRow",
    "PreviewRow",
    "PreviewSession",
    "PreviewStats",
    "Ready",
    "ResolveCardsResult",
    "ResolvedCard",
    "ResolvedName",
    "RowError",
    "RowStatus",
    "TargetType",
    "TextImportEntry",
    "TextImportResult",
    "TextImportStats",
    "UnsupportedUrlError",
    "UrlImportResult",
    "WishlistDuplicateMode",
    "WishlistImportRow",
    "WishlistPriority",
    "condition_label",
    "is_condition_acceptable",
    "normalize_condition",
    "parse_condition",
    "parse_priority",
]
