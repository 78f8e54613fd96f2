from .parsing import (
    MessageKind,
    MessagePolicy,
    ParsedMessage,
    TextView,
    classify_line,
    classify_output,
)
