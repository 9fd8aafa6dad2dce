import os
import re
import stat

import pytest

from clarsandbox import creator
from clarsandbox.errors import CreationError

NAME_RE = r"clar_tmp_[A-Za-z0-9]{6}"


@pytest.mark.parametrize("create", [creator.mkdtemp, creator.mktemp_then_mkdir])
def test_creates_empty_private_directory(tmp_path, create):
    path = create(f"{tmp_path}/clar_tmp_XXXXXX")

    assert re.fullmatch(re.escape(str(tmp_path)) + "/" + NAME_RE, path)
    assert os.path.isdir(path)
    assert os.listdir(path) == []
    if os.name != "nt":
        assert stat.S_IMODE(os.stat(path).st_mode) & 0o077 == 0


def test_names_do_not_repeat(tmp_path):
    template = f"{tmp_path}/clar_tmp_XXXXXX"

    paths = {creator.mkdtemp(template) for _ in range(20)}

    assert len(paths) == 20


def test_mkdtemp_skips_taken_names(tmp_path, monkeypatch):
    taken = tmp_path / "clar_tmp_AAAAAA"
    taken.mkdir()
    monkeypatch.setattr(creator, "_candidates", lambda prefix: iter([prefix + "AAAAAA", prefix + "BBBBBB"]))

    assert creator.mkdtemp(f"{tmp_path}/clar_tmp_XXXXXX") == f"{tmp_path}/clar_tmp_BBBBBB"


def test_mkdtemp_gives_up_when_every_name_is_taken(tmp_path, monkeypatch):
    (tmp_path / "clar_tmp_AAAAAA").mkdir()
    monkeypatch.setattr(creator, "_candidates", lambda prefix: iter([prefix + "AAAAAA"]))

    with pytest.raises(CreationError, match="No unused sandbox name"):
        creator.mkdtemp(f"{tmp_path}/clar_tmp_XXXXXX")


def test_mkdtemp_reports_system_error(tmp_path):
    template = f"{tmp_path}/missing/clar_tmp_XXXXXX"

    with pytest.raises(CreationError) as excinfo:
        creator.mkdtemp(template)

    assert isinstance(excinfo.value.__cause__, FileNotFoundError)
    assert excinfo.value.path.startswith(f"{tmp_path}/missing/clar_tmp_")


def test_mktemp_only_generates_a_name(tmp_path):
    path = creator.mktemp(f"{tmp_path}/clar_tmp_XXXXXX")

    assert re.fullmatch(re.escape(str(tmp_path)) + "/" + NAME_RE, path)
    assert not os.path.exists(path)


def test_name_claimed_between_generate_and_create(tmp_path, monkeypatch):
    raced = tmp_path / "clar_tmp_RACE00"
    raced.mkdir()
    monkeypatch.setattr(creator, "mktemp", lambda template: str(raced))

    with pytest.raises(CreationError) as excinfo:
        creator.mktemp_then_mkdir(f"{tmp_path}/clar_tmp_XXXXXX")

    assert excinfo.value.path == str(raced)
    assert isinstance(excinfo.value.__cause__, FileExistsError)


@pytest.mark.parametrize("template", ["clar_tmp", "clar_tmp_XXXXX", "clar_XXXXXX_tmp"])
def test_template_needs_six_trailing_placeholders(tmp_path, template):
    with pytest.raises(ValueError):
        creator.mkdtemp(f"{tmp_path}/{template}")
