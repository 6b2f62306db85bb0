# tests/test_config.py
import os
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from reelsync.infrastructure.config.loaders.yaml_loader import (
    ConfigError, FileNotFoundConfigError, SchemaValidationError, YamlConfigLoader, YamlParseError
)
from reelsync.infrastructure.config.validators.schema_validator import SchemaValidator
from reelsync.main import DEFAULT_CONFIG_PATH, DEFAULT_SCHEMA_PATH


class TestYamlConfigLoader(unittest.TestCase):
    """Test cases for loading and validating machine configuration."""

    def setUp(self):
        self.loader = YamlConfigLoader(SchemaValidator())
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, name, text):
        path = os.path.join(self.tmp.name, name)
        with open(path, 'w', encoding='utf-8') as file:
            file.write(text)
        return path

    def test_packaged_default_config_is_valid(self):
        config = self.loader.load_file(DEFAULT_CONFIG_PATH, DEFAULT_SCHEMA_PATH)

        self.assertEqual(config["machine_id"], "classic_three_reel")
        self.assertEqual(config["layout"]["number_of_reels"], 3)
        self.assertEqual(config["timing"]["stop_delay"], 250)
        self.assertEqual(sorted(config["reels"]), ["reel1", "reel2", "reel3"])

    def test_schema_defaults_are_filled(self):
        path = self.write("minimal.yaml", "machine_id: tiny\nlayout:\n  number_of_reels: 2\n")

        config = self.loader.load_file(path, DEFAULT_SCHEMA_PATH)

        self.assertEqual(config["layout"]["number_of_reels"], 2)
        self.assertEqual(config["layout"]["symbols_per_reel"], 3)
        self.assertEqual(config["timing"]["stop_delay"], 250)
        self.assertIsNone(config["timing"]["stop_delays"])
        self.assertEqual(config["rng"]["strategy"], "mersenne")
        self.assertEqual(config["simulation"]["cycles"], 10)

    def test_invalid_config_raises_in_strict_mode(self):
        path = self.write("bad.yaml", "layout:\n  number_of_reels: 0\ntiming:\n  stop_delay: -1\n")

        with self.assertRaises(SchemaValidationError) as ctx:
            self.loader.load_file(path, DEFAULT_SCHEMA_PATH)

        self.assertEqual(len(ctx.exception.errors), 2)
        self.assertIn("layout.number_of_reels", ctx.exception.message)

    def test_invalid_config_kept_when_not_strict(self):
        path = self.write("bad.yaml", "rng:\n  strategy: dice\n")

        config = self.loader.set_strict_mode(False).load_file(path, DEFAULT_SCHEMA_PATH)

        self.assertEqual(config["rng"]["strategy"], "dice")

    def test_missing_file(self):
        missing = os.path.join(self.tmp.name, "nope.yaml")

        with self.assertRaises(FileNotFoundConfigError):
            self.loader.load_file(missing)

        self.loader.set_strict_mode(False)
        self.assertEqual(self.loader.load_file(missing, default_config={"a": 1}), {"a": 1})

    def test_parse_error(self):
        path = self.write("broken.yaml", "layout: [unclosed\n")

        with self.assertRaises(YamlParseError):
            self.loader.load_file(path)

    def test_empty_file(self):
        path = self.write("empty.yaml", "")
        self.assertEqual(self.loader.load_file(path), {})

    def test_schema_dict(self):
        path = self.write("m.yaml", "machine_id: 5\n")
        schema = {"type": "object", "properties": {"machine_id": {"type": "string"}}}

        with self.assertRaises(SchemaValidationError):
            self.loader.load_file(path, schema)

    def test_missing_schema_file(self):
        path = self.write("m.yaml", "machine_id: a\n")

        with self.assertRaises(FileNotFoundConfigError):
            self.loader.load_file(path, os.path.join(self.tmp.name, "none.json"))

    def test_load_with_fallbacks(self):
        good = self.write("good.yaml", "machine_id: fallback\n")
        missing = os.path.join(self.tmp.name, "missing.yaml")

        config = self.loader.load_with_fallbacks([missing, good])
        self.assertEqual(config["machine_id"], "fallback")

        with self.assertRaises(ConfigError):
            self.loader.load_with_fallbacks([missing])

        self.loader.set_strict_mode(False)
        self.assertEqual(self.loader.load_with_fallbacks([missing]), {})


class TestSchemaValidator(unittest.TestCase):
    """Test cases for the jsonschema wrapper."""

    def setUp(self):
        self.validator = SchemaValidator()
        self.schema = {
            "type": "object",
            "properties": {
                "timing": {
                    "type": "object",
                    "properties": {"stop_delay": {"type": "number", "default": 250}}
                },
                "name": {"type": "string", "default": "x"}
            }
        }

    def test_validate(self):
        self.assertEqual(self.validator.validate({"name": "a"}, self.schema), (True, []))

        is_valid, errors = self.validator.validate({"name": 3}, self.schema)
        self.assertFalse(is_valid)
        self.assertTrue(errors[0].startswith("At name:"))

    def test_defaults_do_not_touch_input(self):
        config = {}
        is_valid, errors, updated = self.validator.validate_with_defaults(config, self.schema)

        self.assertTrue(is_valid)
        self.assertEqual(updated, {"timing": {"stop_delay": 250}, "name": "x"})
        self.assertEqual(config, {})

    def test_existing_values_win(self):
        _, _, updated = self.validator.validate_with_defaults({"timing": {"stop_delay": 90}}, self.schema)
        self.assertEqual(updated["timing"]["stop_delay"], 90)

    def test_broken_schema(self):
        is_valid, errors = self.validator.validate({}, {"type": "not-a-type"})
        self.assertFalse(is_valid)
        self.assertTrue(errors[0].startswith("Schema error"))


if __name__ == "__main__":
    unittest.main()
