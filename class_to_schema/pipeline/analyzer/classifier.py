"""
Type classifier and generic resolver.

Maps a raw type expression plus the active GenericEnvironment to exactly
one TypeDescriptor. Classification is deterministic and side-effect free:
it looks declarations up but never walks their members.
"""

from __future__ import annotations

from ..constants import ARRAY_WRAPPERS, NULLISH_TYPES, OPEN_OBJECT_TYPES, PRIMITIVE_TYPES
from ..source_model.nodes import (
    ArrayTypeExpr,
    ClassDescriptor,
    LiteralTypeExpr,
    NamedTypeExpr,
    TypeExpr,
    UnionTypeExpr,
)
from ..source_model.provider import SourceModelProvider
from .type_nodes import GenericEnvironment, TypeDescriptor, TypeKind, UtilityOperator

_UTILITY_OPERATORS = {op.value: op for op in UtilityOperator}


class TypeClassifier:
    """Classifies declared types."""

    def __init__(self, provider: SourceModelProvider):
        """
        Initialize the classifier.

        Args:
            provider: Source model used to look referenced names up
        """
        self.provider = provider

    def classify(self, expr: TypeExpr | None, environment: GenericEnvironment, hint: str | None = None) -> TypeDescriptor:
        """
        Classify a type expression.

        Args:
            expr: The raw type expression (None when the member has no type)
            environment: Substitutions for type parameters in scope
            hint: Source location of the referencing declaration, used to
                prefer same-file declarations when names collide

        Returns:
            The TypeDescriptor for the expression
        """
        if expr is None:
            return TypeDescriptor(kind=TypeKind.OPAQUE)

        if isinstance(expr, ArrayTypeExpr):
            return TypeDescriptor(kind=TypeKind.ARRAY, element=self.classify(expr.element, environment, hint))

        if isinstance(expr, UnionTypeExpr):
            return self._classify_union(expr, environment, hint)

        if isinstance(expr, LiteralTypeExpr):
            return self._classify_literal(expr)

        if isinstance(expr, NamedTypeExpr):
            return self._classify_named(expr, environment, hint)

        return TypeDescriptor(kind=TypeKind.OPAQUE, raw=expr)

    def describe_declaration(self, declaration: ClassDescriptor, type_args: list[TypeDescriptor] | None = None) -> TypeDescriptor:
        """Build the descriptor of a direct reference to `declaration`."""
        if declaration.is_enum:
            return TypeDescriptor(kind=TypeKind.ENUM, declaration=declaration)
        return TypeDescriptor(kind=TypeKind.CLASS, declaration=declaration, type_args=list(type_args or []))

    def bind_type_arguments(self, declaration: ClassDescriptor, type_args: list[TypeDescriptor]) -> GenericEnvironment:
        """
        Zip a declaration's type parameters against concrete arguments.

        Parameters without an argument are bound to OPAQUE so that they
        never leak into an outer environment.
        """
        environment: GenericEnvironment = {}
        for i, parameter in enumerate(declaration.type_parameters):
            if i < len(type_args):
                environment[parameter] = type_args[i]
            else:
                environment[parameter] = TypeDescriptor(kind=TypeKind.OPAQUE)
        return environment

    def _classify_named(self, expr: NamedTypeExpr, environment: GenericEnvironment, hint: str | None) -> TypeDescriptor:
        name = expr.name

        # 1. Bound type parameter
        if not expr.type_args and name in environment:
            return environment[name]

        # 2. Array<T> and friends
        if name in ARRAY_WRAPPERS and len(expr.type_args) == 1:
            return TypeDescriptor(kind=TypeKind.ARRAY, element=self.classify(expr.type_args[0], environment, hint))

        primitive = self._primitive_name(name)
        if primitive is not None:
            return TypeDescriptor(kind=TypeKind.PRIMITIVE, primitive=primitive)

        if name in OPEN_OBJECT_TYPES:
            return TypeDescriptor(kind=TypeKind.OPAQUE)

        declaration = self.provider.find_declaration(name, hint)

        # 3. Enum
        if declaration is not None and declaration.is_enum:
            return TypeDescriptor(kind=TypeKind.ENUM, declaration=declaration)

        # 4. Utility operator
        operator = _UTILITY_OPERATORS.get(name)
        if operator is not None and expr.type_args:
            return self._classify_utility(operator, expr, environment, hint)

        # 5. Class or interface, with its type arguments
        if declaration is not None:
            type_args = [self.classify(arg, environment, hint) for arg in expr.type_args]
            return TypeDescriptor(kind=TypeKind.CLASS, declaration=declaration, type_args=type_args)

        # 6. Anything else
        return TypeDescriptor(kind=TypeKind.OPAQUE, raw=expr)

    def _classify_utility(
        self,
        operator: UtilityOperator,
        expr: NamedTypeExpr,
        environment: GenericEnvironment,
        hint: str | None,
    ) -> TypeDescriptor:
        if operator == UtilityOperator.RECORD:
            # Record<K, V>: the value type is the target, literal keys are kept
            keys = self._literal_keys(expr.type_args[0], environment, hint)
            value = expr.type_args[1] if len(expr.type_args) > 1 else None
            return TypeDescriptor(
                kind=TypeKind.UTILITY,
                operator=operator,
                target=self.classify(value, environment, hint),
                keys=keys,
            )

        target = self.classify(expr.type_args[0], environment, hint)
        keys = None
        if operator in (UtilityOperator.PICK, UtilityOperator.OMIT):
            keys = []
            if len(expr.type_args) > 1:
                keys = self._literal_keys(expr.type_args[1], environment, hint) or []

        return TypeDescriptor(kind=TypeKind.UTILITY, operator=operator, target=target, keys=keys)

    def _literal_keys(self, expr: TypeExpr, environment: GenericEnvironment, hint: str | None) -> list[str] | None:
        """Return the string keys of a literal (union) type, or None."""
        if isinstance(expr, LiteralTypeExpr) and isinstance(expr.value, str):
            return [expr.value]

        if isinstance(expr, UnionTypeExpr):
            keys = []
            for member in expr.members:
                member_keys = self._literal_keys(member, environment, hint)
                if member_keys is None:
                    return None
                keys.extend(member_keys)
            return keys

        # A type parameter bound to literal keys, e.g. K in `Pick<User, K>`
        if isinstance(expr, NamedTypeExpr) and not expr.type_args and expr.name in environment:
            bound = environment[expr.name]
            if bound.literals and all(isinstance(value, str) for value in bound.literals):
                return list(bound.literals)

        return None

    def _classify_union(self, expr: UnionTypeExpr, environment: GenericEnvironment, hint: str | None) -> TypeDescriptor:
        # `T | null` is a nullable T: classify by the first meaningful member
        members = [m for m in expr.members if not (isinstance(m, NamedTypeExpr) and m.name in NULLISH_TYPES)]
        if not members:
            return TypeDescriptor(kind=TypeKind.PRIMITIVE, primitive="null")

        # A union of literals keeps every value
        if all(isinstance(m, LiteralTypeExpr) for m in members):
            descriptor = self._classify_literal(members[0])
            descriptor.literals = [m.value for m in members]
            return descriptor

        return self.classify(members[0], environment, hint)

    def _classify_literal(self, expr: LiteralTypeExpr) -> TypeDescriptor:
        value = expr.value
        if isinstance(value, bool):
            primitive = "boolean"
        elif isinstance(value, (int, float)):
            primitive = "number"
        else:
            primitive = "string"
        return TypeDescriptor(kind=TypeKind.PRIMITIVE, primitive=primitive, literals=[value])

    def _primitive_name(self, name: str) -> str | None:
        lowered = name.lower()
        if lowered in PRIMITIVE_TYPES:
            return lowered
        # Express.Multer.File and similar namespaced binary types
        if "." in lowered:
            last = lowered.rsplit(".", 1)[1]
            if PRIMITIVE_TYPES.get(last) is not None and PRIMITIVE_TYPES[last].format == "binary":
                return last
        return None
