from .classifier import DEFAULT_ENCODED_FIELD, Classification, classify
from .codegen.codegen import Codegen, CodegenConfig
from .declare import (
	QueryParamsInfo,
	declared_types,
	get_query_params_info,
	is_query_params,
	query_params,
)
from .env import env
from .errors import (
	CallbackExecutionError,
	ConfigurationError,
	ConstructionError,
	DarkrouteError,
	ErrorReporter,
)
from .payload import (
	Base64JsonPayload,
	NoPayload,
	decode_json_base64,
	encode_json_base64,
)
from .registry import CallbackRegistry
from .schema import (
	CallbackId,
	CallbackIdField,
	EncodedPayload,
	EncodeValueField,
	FieldKind,
	FieldRole,
	FieldSpec,
	Schema,
	schema_from_dataclass,
)
from .serializer import (
	DataclassSerializer,
	StructuralSerializer,
	from_json_value,
	to_json_value,
)
from .transport import build_location, parse_location, parse_query_string

__all__ = [
	# Declaration
	"query_params",
	"QueryParamsInfo",
	"declared_types",
	"get_query_params_info",
	"is_query_params",
	# Schema
	"Schema",
	"FieldSpec",
	"FieldKind",
	"FieldRole",
	"EncodeValueField",
	"CallbackIdField",
	"EncodedPayload",
	"CallbackId",
	"schema_from_dataclass",
	# Classification
	"classify",
	"Classification",
	"DEFAULT_ENCODED_FIELD",
	# Runtime
	"CallbackRegistry",
	"DataclassSerializer",
	"StructuralSerializer",
	"to_json_value",
	"from_json_value",
	"Base64JsonPayload",
	"NoPayload",
	"encode_json_base64",
	"decode_json_base64",
	# Transport
	"build_location",
	"parse_location",
	"parse_query_string",
	# Codegen
	"Codegen",
	"CodegenConfig",
	"env",
	# Errors
	"DarkrouteError",
	"ConfigurationError",
	"ConstructionError",
	"CallbackExecutionError",
	"ErrorReporter",
]
