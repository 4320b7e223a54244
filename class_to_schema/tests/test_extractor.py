from pathlib import Path
from unittest import TestCase

from class_to_schema.pipeline.analyzer import PropertyExtractor, TypeClassifier, TypeKind
from class_to_schema.pipeline.source_model import load_declaration_model

TEST_DATA = Path(__file__).parent / "test_data"


class TestPropertyExtractor(TestCase):
    """Own and inherited property extraction"""

    def setUp(self):
        self.model = load_declaration_model(TEST_DATA / "generics.json")
        self.classifier = TypeClassifier(self.model)
        self.extractor = PropertyExtractor(self.model, self.classifier)

    def _extract(self, name, extractor=None):
        declaration = self.model.find_declaration(name)
        environment = self.classifier.bind_type_arguments(declaration, [])
        return (extractor or self.extractor).extract(declaration, environment)

    def _classify(self, prop):
        return self.classifier.classify(prop.descriptor.type_expr, prop.environment, prop.hint)

    def test_inherited_properties_come_first(self):
        names = [p.name for p in self._extract("User")]
        self.assertEqual(names, ["id", "createdAt", "name", "email", "nickname"])

    def test_generic_chain_resolves_through_bases(self):
        # User extends Named<number> extends Entity<T>
        props = {p.name: p for p in self._extract("User")}

        id_type = self._classify(props["id"])
        self.assertEqual(id_type.kind, TypeKind.PRIMITIVE)
        self.assertEqual(id_type.primitive, "number")
        self.assertEqual(props["id"].declaring_class.name, "Entity")

    def test_generic_class_argument_through_base(self):
        props = {p.name: p for p in self._extract("UserPage")}

        data_type = self._classify(props["data"])
        self.assertEqual(data_type.kind, TypeKind.ARRAY)
        self.assertEqual(data_type.element.declaration.name, "User")

    def test_redeclared_property_replaces_inherited_in_place(self):
        props = self._extract("Override")
        self.assertEqual([p.name for p in props], ["id", "createdAt", "label"])
        self.assertEqual(props[0].declaring_class.name, "Override")
        self.assertEqual(self._classify(props[0]).primitive, "number")

    def test_missing_base_is_skipped(self):
        self.assertEqual([p.name for p in self._extract("Orphan")], ["own"])

    def test_static_and_private_members(self):
        self.assertEqual([p.name for p in self._extract("Secret")], ["name"])

        extractor = PropertyExtractor(self.model, self.classifier, include_non_public=True)
        self.assertEqual([p.name for p in self._extract("Secret", extractor)], ["name", "token"])

    def test_unbound_parameter_stays_opaque(self):
        props = self._extract("Unbound")
        self.assertEqual(self._classify(props[0]).kind, TypeKind.OPAQUE)
