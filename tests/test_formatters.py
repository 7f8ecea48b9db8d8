"""Tests for table output and the secret JSON view."""
import io
import json

from secretctl.cli.formatters import format_table, print_list
from secretctl.secrets.domains.models import Secret, new_secret


class TestFormatTable:

    def test_short_cells_padded_to_min_width(self):
        out = format_table(("A", "B", "C"), [("x", "y", "z")])

        assert out.splitlines() == [
            "A" + " " * 19 + "B" + " " * 19 + "C",
            "x" + " " * 19 + "y" + " " * 19 + "z",
        ]

    def test_wide_cell_widens_whole_column(self):
        wide = "w" * 25
        out = format_table(("ID", "NAME", "DESCRIPTION"), [(wide, "n", "d"), ("s", "n", "d")])

        lines = out.splitlines()
        # 25 chars + 3 padding
        assert all(line.index("n") == 28 for line in lines[1:])
        assert lines[0].index("NAME") == 28

    def test_last_column_not_padded(self):
        out = format_table(("ID", "NAME", "DESCRIPTION"), [("a", "b", "")])

        assert out.splitlines()[1] == "a" + " " * 19 + "b" + " " * 19


class TestPrintList:

    def test_one_row_per_secret_in_order(self):
        buf = io.StringIO()
        print_list([Secret(id="id-2", name="two", description="second"),
                    Secret(id="id-1", name="one", description="first")], out=buf)

        rows = [line.split() for line in buf.getvalue().splitlines()]
        assert rows == [["ID", "NAME", "DESCRIPTION"], ["id-2", "two", "second"], ["id-1", "one", "first"]]


class TestSecretModel:

    def test_to_json_is_tab_indented_public_view(self):
        secret = Secret(id="projects/p/secrets/db", name="db", description="d",
                        username="admin", password="s3cret")

        out = secret.to_json()

        assert out.splitlines()[1].startswith('\t"ID"')
        assert list(json.loads(out)) == ["ID", "Name", "Labels", "Description"]
        assert "admin" not in out and "s3cret" not in out

    def test_credentials_json(self):
        secret = new_secret("db", "admin", "s3cret", "")

        assert json.loads(secret.credentials_json()) == {"username": "admin", "password": "s3cret"}

    def test_repr_hides_credentials(self):
        assert "s3cret" not in repr(new_secret("db", "admin", "s3cret", ""))
