# -*- coding: utf-8 -*-

# Request Guard
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Schema normalization.

Turns what a route declares for a segment into exactly one compiled schema:

  - Schema(...)   - an already-built schema (pydantic model class, TypeAdapter,
                    or any object with a validate() method). Used as-is.
  - FieldMap(...) - a mapping of field name -> field annotation. Wrapped into
                    a pydantic model that is strict (extra fields rejected) or
                    lax (extra fields dropped).
  - None          - no declaration. Either an empty strict field map or a
                    pass-through, depending on missing_schema_behavior.

Raw values are classified once, at construction time, by as_declaration().
Compiled schemas hold no per-request state and are shared by all requests.
"""

import inspect
from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    Type,
    Union,
    runtime_checkable,
)

from loguru import logger
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PydanticUserError,
    TypeAdapter,
    ValidationError,
    create_model,
)
from pydantic.fields import FieldInfo

from request_guard.errors import ConfigurationError, issues_from_pydantic
from request_guard.options import ValidationOptions, get_global_options
from request_guard.segments import Issue, ValidationOutcome


@runtime_checkable
class CompiledSchema(Protocol):
    """Anything that can validate one segment's data."""

    def validate(
        self, value: Any
    ) -> Union[ValidationOutcome, Awaitable[ValidationOutcome]]: ...


@dataclass(frozen=True)
class Schema:
    """Declaration holding an already-built schema."""

    schema: Any


@dataclass(frozen=True)
class FieldMap:
    """Declaration holding a mapping of field name -> field annotation."""

    fields: Mapping[str, Any]


Declaration = Union[Schema, FieldMap]


def _is_model_class(value: Any) -> bool:
    return inspect.isclass(value) and issubclass(value, BaseModel)


def _needs_wrapping(schema: Any) -> bool:
    return _is_model_class(schema) or isinstance(schema, TypeAdapter)


def is_compiled_schema(value: Any) -> bool:
    """
    Probe whether a value can be used as a schema without wrapping.

    Never raises: objects whose attribute access fails are treated as
    not being schemas. Model instances are data, not schemas; their
    deprecated validate() classmethod does not count.
    """
    if _is_model_class(value) or isinstance(value, TypeAdapter):
        return True
    if inspect.isclass(value) or isinstance(value, BaseModel):
        return False
    try:
        return callable(getattr(value, "validate", None))
    except Exception:
        return False


def as_declaration(value: Any) -> Optional[Declaration]:
    """
    Classify a raw segment declaration.

    Args:
        value: None, a Schema/FieldMap, a schema object, or a mapping

    Returns:
        Schema, FieldMap, or None for an absent declaration

    Raises:
        ConfigurationError: If the value is neither a schema nor a mapping
    """
    if value is None or isinstance(value, (Schema, FieldMap)):
        return value
    if is_compiled_schema(value):
        return Schema(value)
    if isinstance(value, Mapping):
        return FieldMap(value)
    raise ConfigurationError(
        f"Expected a schema or a mapping of field schemas, got {type(value).__name__}"
    )


class PydanticSchema:
    """
    Compiled schema backed by pydantic.

    Wraps a BaseModel subclass or any type pydantic can build a TypeAdapter
    for. Model classes produce model instances. Field-map models produce a
    plain dict of the declared fields so downstream code keeps reading
    the segment by field name.
    """

    def __init__(
        self,
        target: Any,
        field_names: Optional[List[Tuple[str, str]]] = None,
    ):
        self.field_names = field_names
        if _is_model_class(target):
            self._validate = target.model_validate
        elif isinstance(target, TypeAdapter):
            self._validate = target.validate_python
        else:
            try:
                self._validate = TypeAdapter(target).validate_python
            except PydanticUserError as e:
                raise ConfigurationError(f"Cannot build a schema for {target!r}: {e}") from e
        self.target = target

    def validate(self, value: Any) -> ValidationOutcome:
        try:
            result = self._validate(value)
        except ValidationError as e:
            return ValidationOutcome.failed(issues_from_pydantic(e))

        if self.field_names is not None:
            result = {external: getattr(result, internal) for internal, external in self.field_names}
        return ValidationOutcome.ok(result)

    def __repr__(self) -> str:
        return f"PydanticSchema({getattr(self.target, '__name__', self.target)!r})"


class PassThroughSchema:
    """Accepts any value and returns it unchanged."""

    def validate(self, value: Any) -> ValidationOutcome:
        return ValidationOutcome.ok(value)


class RefinedSchema:
    """
    A schema followed by an extra check on its coerced output.

    The check may be a plain function or a coroutine function, which makes it
    suitable for lookups against external state (e.g. "email not taken").
    """

    def __init__(
        self,
        inner: Any,
        check: Callable[[Any], Union[bool, Awaitable[bool]]],
        message: str,
        code: str = "custom",
        path: Tuple[str, ...] = (),
    ):
        if _needs_wrapping(inner) or not is_compiled_schema(inner):
            inner = PydanticSchema(inner)
        self.inner = inner
        self.check = check
        self.issue = Issue(path=tuple(path), message=message, code=code)

    async def validate(self, value: Any) -> ValidationOutcome:
        outcome = self.inner.validate(value)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        if not outcome.success:
            return outcome

        passed = self.check(outcome.value)
        if inspect.isawaitable(passed):
            passed = await passed
        if not passed:
            return ValidationOutcome.failed([self.issue])
        return outcome


def refine(
    schema: Any,
    check: Callable[[Any], Union[bool, Awaitable[bool]]],
    message: str,
    code: str = "custom",
    path: Tuple[str, ...] = (),
    options: Optional[ValidationOptions] = None,
) -> RefinedSchema:
    """
    Attach a (possibly async) check to a schema.

    Example:
        >>> async def email_is_free(data):
        ...     return not await users.exists(email=data["email"])
        >>> body = refine(FieldMap({"email": str}), email_is_free, "Email taken", path=("email",))

    A FieldMap is compiled here, with strictness taken from options (or the
    global options), the same way validate() compiles field maps.
    """
    if isinstance(schema, FieldMap):
        resolved = options if options is not None else get_global_options()
        schema = compile_field_map(schema.fields, resolved.default_schema_object)
    elif isinstance(schema, Schema):
        schema = schema.schema
    return RefinedSchema(schema, check, message, code=code, path=path)


def _split_field_spec(name: str, spec: Any) -> Tuple[Any, Any]:
    if isinstance(spec, tuple):
        if len(spec) != 2:
            raise ConfigurationError(
                f"Field {name!r} must be an annotation or an (annotation, default) pair"
            )
        return spec
    return spec, ...


def compile_field_map(
    fields: Mapping[str, Any],
    strictness: str,
    model_name: str = "SegmentFields",
) -> PydanticSchema:
    """
    Build an object schema from a field map.

    Field values may be an annotation (int, Annotated[str, Field(min_length=3)])
    or an (annotation, default) pair where default may be a FieldInfo.

    Args:
        fields: Mapping of field name -> field spec
        strictness: "strict" rejects undeclared fields, "lax" drops them
        model_name: Name of the generated pydantic model

    Raises:
        ConfigurationError: If pydantic cannot build a model from the fields
    """
    definitions: Dict[str, Any] = {}
    field_names: List[Tuple[str, str]] = []
    declared = set(fields)

    for index, (name, spec) in enumerate(fields.items()):
        if not isinstance(name, str):
            raise ConfigurationError(f"Field names must be strings, got {name!r}")
        annotation, default = _split_field_spec(name, spec)

        if name.isidentifier() and not name.startswith("_"):
            definitions[name] = (annotation, default)
            field_names.append((name, name))
            continue

        # Names pydantic cannot use as attributes ("user-id", "_private")
        # get a generated attribute name and validate through an alias.
        if isinstance(default, FieldInfo):
            raise ConfigurationError(
                f"Field {name!r} is not a valid attribute name; declare it on a "
                "pydantic model with an explicit alias instead"
            )
        internal = f"field_{index}"
        while internal in declared or internal in definitions:
            internal += "_"
        definitions[internal] = (annotation, Field(default, validation_alias=name))
        field_names.append((internal, name))

    config = ConfigDict(extra="forbid" if strictness == "strict" else "ignore")
    try:
        model: Type[BaseModel] = create_model(model_name, __config__=config, **definitions)
    except (PydanticUserError, TypeError, ValueError, NameError) as e:
        raise ConfigurationError(f"Invalid field map for {model_name}: {e}") from e

    return PydanticSchema(model, field_names=field_names)


def compile_segment(
    declaration: Optional[Declaration],
    options: ValidationOptions,
    model_name: str = "SegmentFields",
) -> Any:
    """
    Produce the single compiled schema for one segment.

    Strictness and missing-schema behavior are read from options here, once;
    validators built earlier are unaffected by later option changes.

    Args:
        declaration: Result of as_declaration()
        options: Options to resolve defaults from
        model_name: Name for generated field-map models

    Returns:
        An object satisfying CompiledSchema
    """
    if isinstance(declaration, Schema):
        schema = declaration.schema
        if _needs_wrapping(schema):
            return PydanticSchema(schema)
        if not is_compiled_schema(schema):
            # Explicit Schema(...) around a plain annotation such as int or List[str]
            return PydanticSchema(schema)
        return schema

    if isinstance(declaration, FieldMap):
        return compile_field_map(
            declaration.fields, options.default_schema_object, model_name
        )

    if options.missing_schema_behavior == "any":
        logger.debug("[SchemaNormalizer] {}: no schema, passing data through", model_name)
        return PassThroughSchema()
    return compile_field_map({}, "strict", model_name)
