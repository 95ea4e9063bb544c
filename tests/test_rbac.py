from types import SimpleNamespace

import pytest

from security.rbac import ANY_ROLE, STAFF, Capability, authorize
from utils.errors import Forbidden


def _actor(role, id=1):
    return SimpleNamespace(id=id, role=role)


def _owned_by_actor(actor, resource):
    return resource.owner_id == actor.id


EDIT = Capability("edit_thing", STAFF, owns=_owned_by_actor)
PAY = Capability("pay_thing", ANY_ROLE, owns=_owned_by_actor, scoped_roles=ANY_ROLE)
ADMIN_ONLY = Capability("purge", ["admin"])


def test_role_outside_capability_is_forbidden():
    with pytest.raises(Forbidden):
        authorize(_actor("user"), EDIT, SimpleNamespace(owner_id=1))
    with pytest.raises(Forbidden):
        authorize(_actor("manager"), ADMIN_ONLY)


def test_scoped_role_needs_ownership():
    mine = SimpleNamespace(owner_id=1)
    theirs = SimpleNamespace(owner_id=2)
    assert authorize(_actor("manager"), EDIT, mine).role == "manager"
    with pytest.raises(Forbidden):
        authorize(_actor("manager"), EDIT, theirs)


def test_admin_is_unscoped_by_default():
    assert authorize(_actor("admin"), EDIT, SimpleNamespace(owner_id=99))


def test_admin_can_be_scoped_explicitly():
    with pytest.raises(Forbidden):
        authorize(_actor("admin"), PAY, SimpleNamespace(owner_id=99))
    assert authorize(_actor("user"), PAY, SimpleNamespace(owner_id=1))
