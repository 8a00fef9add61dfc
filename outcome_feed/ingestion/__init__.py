"""BitMEX compositeIndex ingestion."""

from .indices import Granularity, Index
from .normalize import OutcomeRecord, RawQuote, map_quote
from .pagination import MAX_PAGE_SIZE, PageDescriptor, paginate
