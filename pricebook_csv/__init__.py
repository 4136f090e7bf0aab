"""Price book XML export -> flat CSV."""

from .accumulator import ActiveField, BaseFields, Row, RowAccumulator, accumulate_rows
from .errors import (
    ConfigError,
    ConversionError,
    InvalidInputKind,
    MalformedDocument,
    OutOfOrderDocument,
    UnreadableInput,
)
from .events import ElementClosed, ElementOpened, Text, iter_events
from .pipeline import (
    ConversionOutcome,
    ConversionStatus,
    PipelineDriver,
    convert_document,
    output_name_for,
    parse_document,
)
from .tabular import CSV_HEADER, render_rows

__version__ = "1.0.0"
