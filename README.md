# miko

Building blocks for declaring HTTP handlers as plain Python functions:

- reading a handler's parameters and deciding where each one gets its value
  (path, query, body, dependency, configuration value, or plain);
- parsing attribute argument lists such as `"/users", method = "get, post"`;
- inferring and collecting OpenAPI details for a handler and rendering them
  as an OpenAPI path item;
- small HTTP helpers: status codes, method lists, route encoding and a
  streaming body that stops cleanly on error.

The package has no dependencies outside the standard library.

## Installation

```
pip install miko
```

To run the test suite:

```
pip install "miko[test]"
pytest
```

## Handler parameters (`miko.params`)

Mark parameters with `typing.Annotated` and `Mark`. A string passed as the
second argument of `Mark` is parsed as an attribute argument list.

```python
from typing import Annotated, Optional
from miko.params import Mark, route_params, classify, build_query_model, config_path

def list_users(
    name: Annotated[Optional[str], Mark("query"), Mark("desc", '"Name filter"')],
    page: Annotated[int, Mark("query")] = 1,
    limit: Annotated[int, Mark("config", '"users.limit"')] = 0,
):
    ...

params = route_params(list_users)
[classify(p) for p in params]   # ArgKind.QUERY, ArgKind.QUERY, ArgKind.CONFIG
Query = build_query_model(params, "ListUsersQuery")
Query(name="ann")               # a keyword-only dataclass; name defaults to None, page to 1
config_path(params[2])          # "users.limit"
```

- `route_params(func)` returns a `RouteParam` for each parameter, in
  declaration order, with its type, markers, whether it is optional and its
  default. `RouteParam.has_mark(name)` and `RouteParam.description()` (the
  text of a `desc` marker) read the markers.
- `classify(param)` returns an `ArgKind`: `PATH`, `QUERY`, `JSON_BODY`,
  `RAW_BODY`, `DEP`, `CONFIG` or `PLAIN`. A `body` marker gives `RAW_BODY`
  when its arguments contain `str`, or, with no arguments, when the type is a
  string; otherwise `JSON_BODY`. A parameter with only other markers raises
  `ValueError`.
- `build_query_model(params, name)` builds a dataclass from the `query`
  parameters, or returns `None` when there are none.
- `config_path(param)` returns the configuration key of a `config`
  parameter (`"key"` or `path = "key"`), `None` for parameters without the
  marker, and raises `ValueError` when the marker has no key.
- `is_option(annotation)` returns `(True, inner)` for optional types and
  `is_string_type(annotation)` tells whether a type is `str`.

## Attribute argument lists (`miko.attr_map`)

```python
from miko.attr_map import StrAttrMap

attrs = StrAttrMap.parse('"/users", method = "get, post", sse')
attrs.default                  # "/users"
attrs.get("method")            # "get, post"
attrs.get("sse")               # "sse"
attrs.get_or_default("path")   # "/users"
attrs.to_source()              # '"/users", method = "get, post", sse = "sse"'
```

Only string values are kept; `key = <non-string>` entries are skipped and
`name(...)` groups are ignored. Malformed input raises `ValueError`.

## OpenAPI (`miko.openapi`)

```python
from typing import Annotated
from miko.params import Mark
from miko.openapi.attributes import u_tag, u_response, parse_utoipa_attrs
from miko.openapi.infer import infer_openapi_config
from miko.openapi.generator import generate_operation

@u_tag("Users")
@u_response(status=404, description="User not found")
def get_user(id: Annotated[int, Mark("path"), Mark("desc", '"User id"')]):
    """Fetch a user.

    Looks the user up by its identifier.
    """

config = parse_utoipa_attrs(get_user)
inferred = infer_openapi_config(get_user)
config.auto_summary = inferred.auto_summary
config.auto_description = inferred.auto_description
config.auto_params = inferred.auto_params
config.auto_request_body = inferred.auto_request_body

generate_operation("GET", "/users/{id}", config)
# {"/users/{id}": {"get": {"summary": "Fetch a user.", ..., "responses": {"404": ...}}}}
```

- `miko.openapi.attributes`: the decorators `u_response`, `u_tag`,
  `u_summary`, `u_description`, `u_request_body`, `u_param` and
  `u_deprecated` attach details to a function; `parse_utoipa_attrs(func)`
  collects them, in declaration order, into an `OpenApiConfig`. Details given
  with `u_param` are validated and stored but not collected.
- `miko.openapi.infer`: `extract_doc_comments` splits a docstring into a
  summary (first non-blank line) and a description (the remaining lines);
  `infer_params_from_fn_args` reads `path`/`query`/`header`/`body` markers and
  parameter types named `Path`, `Query`, `Json` and `Form`, and treats a last,
  unmarked `str` parameter as a `text/plain` body; `infer_openapi_config`
  combines both. `extract_path_params("/users/{id}")` gives `["id"]` and
  `infer_path_from_fn_name("get_user")` gives `"/user"`. No response is
  inferred from a return type.
- `miko.openapi.config`: `OpenApiConfig` holds user and inferred details;
  its `final_*` methods prefer the user's values, let user parameters replace
  inferred ones of the same name, and list the inferred response before the
  user's.
- `miko.openapi.generator`: `generate_operation(method, path, config)`
  returns `{path: {method: operation}}`; `HttpMethod.from_method` maps unknown
  methods to `GET`.

## HTTP helpers (`miko.core`)

- `HTTPStatusCode`: an `IntEnum` of named status codes.
- `into_methods(value)`: `"GET, POST"`, a single method or a sequence becomes
  a list of method names; invalid names raise `ValueError`.
- `encode_route(path)`: percent-encodes everything except letters, digits and
  `/-_:.{}`.
- `decode_path(path)`: percent-decodes (invalid UTF-8 is replaced) and drops
  leading slashes.
- `empty_body()`: returns `b""`.
- `FallibleStreamBody(stream, length=None)`: iterates the chunks of `stream`
  as `bytes` and ends quietly at the first exception raised or yielded;
  `size_hint()` returns a `SizeHint` that is exact when `length` is given.

## What this package does not do

It does not register routes, turn handlers into callable endpoints, inject
dependencies or configuration values, apply path prefixes or middleware
layers, or serve HTTP. It provides the analysis and documentation pieces
that such a layer would build on; wiring handlers to a server is left to the
application.