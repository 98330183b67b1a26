"""This is a collection of pytest fixtures for use in tests.

There are three type of fixtures available:

* Fixtures that have some side-effect. They don't return any useful
  value and generally should be injected via
  ``pytest.mark.usefixtures``. Ex.: `clean_db`, `clean_seed_registry`.

* Fixtures that provide value. Ex. `cli`, `script_dir`, `seed_dirs`,
  `people_set`, `people`.

* Fixtures that provide factory function. Ex. `write_script`,
  `write_definition`, `reset_db`.

"""
from __future__ import annotations

import copy
import datetime
import os
import textwrap
from typing import Any, Callable, Iterable

import pytest
from click.testing import CliRunner
from pytest_factoryboy import register

import config_scripts.cli
import config_scripts.model as model
import config_scripts.tests.factories as factories
import config_scripts.tests.models as models
from config_scripts.common import config
from config_scripts.scripts import clear_registered_scripts
from config_scripts.scripts.script import class_name_for
from config_scripts.seeds import POLYMORPHIC, SeedSet, registry


@register
class HairColorFactory(factories.HairColor):
    pass


@register
class TeamFactory(factories.Team):
    pass


@register
class PersonFactory(factories.Person):
    pass


@register
class EmployeeFactory(factories.Employee):
    pass


@register
class BadgeFactory(factories.Badge):
    pass


@pytest.fixture
def config_scripts_config(request: pytest.FixtureRequest,
                          monkeypatch: pytest.MonkeyPatch):
    """Allows to override the configuration object used by tests

    Takes into account config patches introduced by the
    ``config_scripts_config`` mark.

    If you just want to set one or more configuration options for the
    scope of a test (or a test class), use the ``config_scripts_config``
    mark::

        @pytest.mark.config_scripts_config(
            'config_scripts.seeds.on_collision', 'reject')
        def test_collision_rejected():

            # ...

    """
    _original = copy.deepcopy(config.copy())
    for mark in request.node.iter_markers(u"config_scripts_config"):
        monkeypatch.setitem(config, *mark.args)

    yield config
    config.clear()
    config.update(_original)


@pytest.fixture
def cli(config_scripts_config: Any, monkeypatch: pytest.MonkeyPatch):
    """Provides object for invoking CLI commands from tests.

    This is `click.testing.CliRunner`, so all examples
    from `Click docs
    <https://click.palletsprojects.com/en/master/testing/>`_ are valid
    for it. The configuration of the test is used instead of an INI file.

    """
    monkeypatch.setattr(
        config_scripts.cli, u"load_config",
        lambda path=None: config_scripts_config.copy())
    return CliRunner()


@pytest.fixture(scope=u"session")
def reset_db():
    """Callable for resetting the database to the initial state.

    If possible use the ``clean_db`` fixture instead.

    """
    def reset():
        model.Session.rollback()
        model.repo.delete_all()
        model.Session.remove()

    return reset


@pytest.fixture
def clean_db(reset_db: Callable[[], None]):
    """Resets the database to the initial state.

    This can be used either for all tests in a class::

        @pytest.mark.usefixtures("clean_db")
        class TestExample(object):

            def test_example(self):

    or for a single test::

        class TestExample(object):

            @pytest.mark.usefixtures("clean_db")
            def test_example(self):

    """
    reset_db()
    yield
    model.Session.rollback()


@pytest.fixture
def clean_seed_registry():
    """Empty the seed set registry before and after the test.
    """
    registry.clear()
    yield
    registry.clear()


@pytest.fixture
def script_dir(tmp_path: Any, config_scripts_config: Any) -> Iterable[str]:
    """A temporary, empty directory for config scripts.

    The script class registry is cleared after the test.
    """
    path = tmp_path / u"config_scripts"
    path.mkdir()
    config_scripts_config[u"config_scripts.directory"] = str(path)
    yield str(path)
    clear_registered_scripts()


@pytest.fixture
def write_script(script_dir: str):
    """Factory for config script files.

    Creates ``<timestamp>_<slug>.py`` in the script directory. `body` is the
    source of the file; by default a script class is generated whose
    ``apply`` and ``revert`` create and delete a hair color named after the
    slug::

        def test_run(write_script):
            write_script("20140208182050", "create_red")

    """
    def writer(timestamp: str, slug: str, body: str = None) -> str:
        if body is None:
            class_name = class_name_for(slug)
            body = _default_script.format(class_name=class_name, slug=slug)
        path = os.path.join(script_dir, u"{}_{}.py".format(timestamp, slug))
        with open(path, u"w") as f:
            f.write(textwrap.dedent(body))
        return path

    return writer


_default_script = u'''
from config_scripts import Script
from config_scripts.tests.models import HairColor


class {class_name}(Script):

    def apply(self):
        self.session.add(HairColor(color=u"{slug}"))

    def revert(self):
        self.session.query(HairColor).filter_by(color=u"{slug}").delete()
'''


@pytest.fixture
def seed_dirs(tmp_path: Any, config_scripts_config: Any) -> dict[str, str]:
    """Temporary seed definition and data directories.
    """
    definitions = tmp_path / u"definitions"
    data = tmp_path / u"data"
    definitions.mkdir()
    data.mkdir()
    config_scripts_config[
        u"config_scripts.seeds.definitions_directory"] = str(definitions)
    config_scripts_config[u"config_scripts.seeds.data_directory"] = str(data)
    return {u"definitions": str(definitions), u"data": str(data)}


@pytest.fixture
def people_set() -> SeedSet:
    """A seed set covering all the test models.

    People are identified by their hair color and name, badges by their
    holder and label. The scope of a person is a polymorphic reference to
    a team or a hair color.
    """
    seed_set = SeedSet(u"people", 1)
    seed_set.seeds_for(models.HairColor, fields=[u"color", u"hex_value"],
                       key_fields=[u"color"])
    seed_set.seeds_for(models.Team, fields=[u"name", u"founded", u"active"],
                       key_fields=[u"name"])
    seed_set.seeds_for(models.Person,
                       fields=[u"name", u"age", u"hair_color", u"scope"],
                       key_fields=[u"hair_color", u"name"],
                       associations={u"scope": POLYMORPHIC})
    seed_set.seeds_for(models.Badge, fields=[u"label", u"holder"],
                       key_fields=[u"holder", u"label"])
    return seed_set


@pytest.fixture
def people(clean_db: None, hair_color_factory: Any, team_factory: Any,
           person_factory: Any, badge_factory: Any) -> dict[str, Any]:
    """Records for the ``people_set`` seed set, keyed by a short name.

    There are two people called John, told apart by their hair color.
    """
    red = hair_color_factory(color=u"red")
    brown = hair_color_factory(color=u"brown")
    reds = team_factory(name=u"Reds", founded=datetime.date(1999, 4, 1))
    john = person_factory(name=u"John", age=30, hair_color=red)
    other_john = person_factory(name=u"John", age=41, hair_color=brown)
    jane = person_factory(name=u"Jane", age=25, hair_color=red)
    john.scope = reds
    jane.scope = brown
    gold = badge_factory(label=u"gold", holder=other_john)
    model.Session.flush()
    return {
        u"red": red,
        u"brown": brown,
        u"reds": reds,
        u"john": john,
        u"other_john": other_john,
        u"jane": jane,
        u"gold": gold,
    }


@pytest.fixture
def write_definition(seed_dirs: dict[str, str], clean_seed_registry: None):
    """Factory for seed definition files.
    """
    def writer(name: str, body: str) -> str:
        path = os.path.join(seed_dirs[u"definitions"], name + u".py")
        with open(path, u"w") as f:
            f.write(textwrap.dedent(body))
        return path

    return writer
