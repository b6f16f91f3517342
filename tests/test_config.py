"""
Unit tests for configuration loading and validation.
"""
import json
import tempfile
import unittest
from argparse import Namespace
from pathlib import Path

from go_dao_generator.config_validation import (
    DatabaseSettings,
    load_config,
    validate_and_parse_config,
)
from go_dao_generator.exceptions import ConfigurationError


def cli_args(**overrides):
    values = {
        "config": None,
        "output_dir": None,
        "log_file": None,
        "package_name": None,
        "verbose": False,
        "no_color": False,
    }
    values.update(overrides)
    return Namespace(**values)


class TestDatabaseSettings(unittest.TestCase):
    """Test the connection settings model."""

    def test_db_alias(self):
        settings = DatabaseSettings.model_validate({"host": "db.local", "db": "inventory"})
        self.assertEqual(settings.dbname, "inventory")
        self.assertEqual(settings.port, 5432)
        self.assertEqual(settings.sslmode, "disable")

    def test_port_from_string(self):
        settings = DatabaseSettings.model_validate({"dbname": "x", "port": "6432"})
        self.assertEqual(settings.port, 6432)

    def test_dsn_contains_settings(self):
        settings = DatabaseSettings.model_validate(
            {"host": "db.local", "user": "reader", "password": "secret", "dbname": "inventory"}
        )
        dsn = settings.dsn()
        for fragment in ("host=db.local", "user=reader", "password=secret", "dbname=inventory", "sslmode=disable"):
            self.assertIn(fragment, dsn)

    def test_dsn_omits_unset_values(self):
        dsn = DatabaseSettings.model_validate({"dbname": "inventory"}).dsn()
        self.assertNotIn("user=", dsn)
        self.assertNotIn("password=", dsn)


class TestValidateAndParseConfig(unittest.TestCase):
    """Test schema validation errors."""

    def test_minimal(self):
        config = validate_and_parse_config({"database": {"dbname": "inventory"}})
        self.assertEqual(config.package_name, "main")
        self.assertEqual(config.output_dir, "./outputs")
        self.assertEqual(config.log_file, "./postgres-to-go.log")

    def test_missing_database(self):
        with self.assertRaises(ConfigurationError) as ctx:
            validate_and_parse_config({})
        self.assertIn("database", ctx.exception.message)

    def test_bad_port(self):
        with self.assertRaises(ConfigurationError) as ctx:
            validate_and_parse_config({"database": {"dbname": "x", "port": 70000}})
        self.assertIn("between 0 and 65535", ctx.exception.message)

    def test_non_numeric_port(self):
        with self.assertRaises(ConfigurationError):
            validate_and_parse_config({"database": {"dbname": "x", "port": "abc"}})

    def test_bad_sslmode(self):
        with self.assertRaises(ConfigurationError):
            validate_and_parse_config({"database": {"dbname": "x", "sslmode": "sometimes"}})

    def test_bad_package_name(self):
        for name in ("Models", "func", "my-pkg"):
            with self.subTest(name=name):
                with self.assertRaises(ConfigurationError):
                    validate_and_parse_config({"database": {"dbname": "x"}, "package_name": name})

    def test_table_lists_stripped(self):
        config = validate_and_parse_config(
            {"database": {"dbname": "x"}, "include_tables": [" book ", "author"]}
        )
        self.assertEqual(config.include_tables, ["book", "author"])

    def test_blank_table_name_rejected(self):
        with self.assertRaises(ConfigurationError):
            validate_and_parse_config({"database": {"dbname": "x"}, "exclude_tables": ["  "]})

    def test_unknown_keys_ignored(self):
        config = validate_and_parse_config({"database": {"dbname": "x"}, "colour": "blue"})
        self.assertFalse(hasattr(config, "colour"))

    def test_attribute_access_only(self):
        config = validate_and_parse_config({"database": {"dbname": "x"}})
        self.assertFalse(hasattr(config, "get"))
        with self.assertRaises(TypeError):
            config["package_name"]


class TestLoadConfig(unittest.TestCase):
    """Test reading config files and applying CLI overrides."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, name, text):
        path = self.dir / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    def test_yaml_file(self):
        path = self.write(
            "config.yaml",
            "database:\n"
            "  host: db.local\n"
            "  port: 5433\n"
            "  user: reader\n"
            "  dbname: inventory\n"
            "output_dir: generated\n"
            "package_name: models\n"
            "exclude_tables:\n"
            "  - schema_migrations\n",
        )
        config = load_config(path, cli_args())
        self.assertEqual(config.database.port, 5433)
        self.assertEqual(config.package_name, "models")
        self.assertEqual(config.exclude_tables, ["schema_migrations"])
        self.assertTrue(Path(config.output_dir).is_absolute())

    def test_flat_json_file(self):
        """Connection keys may sit at the top level, with 'db' naming the database."""
        path = self.write(
            "postgres-to-go.config",
            json.dumps(
                {"host": "localhost", "port": 5432, "user": "postgres", "password": "pw", "db": "shop"}
            ),
        )
        config = load_config(path, cli_args())
        self.assertEqual(config.database.dbname, "shop")
        self.assertEqual(config.database.password, "pw")

    def test_cli_overrides(self):
        path = self.write("config.yaml", "database:\n  dbname: inventory\npackage_name: models\n")
        out = str(self.dir / "go-out")
        config = load_config(path, cli_args(output_dir=out, package_name="dao"))
        self.assertEqual(config.output_dir, str(Path(out).resolve()))
        self.assertEqual(config.package_name, "dao")

    def test_missing_file(self):
        with self.assertRaises(ConfigurationError) as ctx:
            load_config(str(self.dir / "nope.yaml"), cli_args())
        self.assertIn("Can not read config file", ctx.exception.message)

    def test_no_path(self):
        with self.assertRaises(ConfigurationError):
            load_config(None, cli_args())

    def test_unparseable_file(self):
        path = self.write("config.yaml", "database: [unclosed\n")
        with self.assertRaises(ConfigurationError) as ctx:
            load_config(path, cli_args())
        self.assertIn("Can not parse config file", ctx.exception.message)

    def test_non_mapping_content(self):
        path = self.write("config.yaml", "- just\n- a list\n")
        with self.assertRaises(ConfigurationError):
            load_config(path, cli_args())


if __name__ == "__main__":
    unittest.main()
