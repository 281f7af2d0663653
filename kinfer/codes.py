"""Status codes and type tags shared across the runtime."""

from enum import IntEnum


class RuntimeParameterType(IntEnum):
    """Kind of value held by an operator parameter."""

    UNKNOWN = 0
    BOOL = 1
    INT = 2
    FLOAT = 3
    STRING = 4
    INT_ARRAY = 5
    FLOAT_ARRAY = 6
    STRING_ARRAY = 7


class InferStatus(IntEnum):
    """Outcome of a layer's forward pass."""

    UNKNOWN = -1
    SUCCESS = 0
    FAILED_INPUT_EMPTY = 1
    FAILED_WEIGHT_PARAMETER_ERROR = 2
    FAILED_BIAS_PARAMETER_ERROR = 3
    FAILED_STRIDE_PARAMETER_ERROR = 4
    FAILED_DIMENSION_PARAMETER_ERROR = 5
    FAILED_INPUT_OUT_SIZE_ADAPTING_ERROR = 6
    FAILED_OUTPUT_SIZE_ERROR = 7
    FAILED_YOLO_STAGE_NUMBER_ERROR = 8
    FAILED_SHAPE_PARAMETER_ERROR = 9
    FAILED_CHANNEL_PARAMETER_ERROR = 10


class ParseParameterAttrStatus(IntEnum):
    """Outcome of reading a layer's parameters and attributes."""

    MISSING_UNKNOWN = -1
    PARSE_SUCCESS = 0
    MISSING_STRIDE = 1
    MISSING_PADDING = 2
    MISSING_KERNEL = 3
    MISSING_USE_BIAS = 4
    MISSING_IN_CHANNEL = 5
    MISSING_OUT_CHANNEL = 6
    MISSING_EPS = 7
    MISSING_NUM_FEATURES = 8
    MISSING_DIM = 9
    MISSING_EXPR = 10
    MISSING_OUT_HW = 11
    MISSING_SHAPE = 12
    MISSING_GROUPS = 13
    MISSING_SCALE = 14
    MISSING_RESIZE_MODE = 15
    MISSING_DILATION = 16
    MISSING_PADDING_MODE = 16
    ATTR_MISSING_BIAS = 21
    ATTR_MISSING_WEIGHT = 22
    ATTR_MISSING_RUNNING_MEAN = 23
    ATTR_MISSING_RUNNING_VAR = 24
    ATTR_MISSING_OUT_FEATURES = 25
    ATTR_MISSING_YOLO_STRIDES = 26
    ATTR_MISSING_YOLO_ANCHOR_GRIDES = 27
    ATTR_MISSING_YOLO_GRIDES = 28


class RuntimeDataType(IntEnum):
    """Element type of operand data and attribute weights."""

    UNKNOWN = 0
    FLOAT32 = 1
    FLOAT64 = 2
    FLOAT16 = 3
    INT32 = 4
    INT64 = 5
    INT16 = 6
    INT8 = 7
    UINT8 = 8