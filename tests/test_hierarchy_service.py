import uuid
from types import SimpleNamespace

from tajneed.db.enums import OrganizationLevel
from tajneed.db.models import Dila, Muqam
from tajneed.services import hierarchy_service


def test_member_resolves_through_mapped_jamaat(db, make_hierarchy, make_jamaat, make_member):
    hierarchy = make_hierarchy()
    make_jamaat(101, muqam=hierarchy.muqam)
    member = make_member("10001", jamaat_id=101)

    context = hierarchy_service.resolve_hierarchy(db, member)

    assert context.muqam_id == hierarchy.muqam.id
    assert context.dila_id == hierarchy.muqam.dila_id == hierarchy.dila.id
    assert context.zone_id == hierarchy.dila.zone_id == hierarchy.zone.id
    assert context.organization_level == OrganizationLevel.ZONE


def test_member_without_jamaat_or_muqam_resolves_to_nothing(db, make_member):
    member = make_member("10002")

    context = hierarchy_service.resolve_hierarchy(db, member)

    assert context.muqam_id is None
    assert context.dila_id is None
    assert context.zone_id is None
    assert context.organization_level is None


def test_direct_muqam_link_is_walked(db, make_hierarchy):
    hierarchy = make_hierarchy()
    hint = SimpleNamespace(jamaat_id=None, muqam_id=hierarchy.muqam.id)

    context = hierarchy_service.resolve_hierarchy(db, hint)

    assert context.muqam_id == hierarchy.muqam.id
    assert context.zone_id == hierarchy.zone.id
    assert context.organization_level == OrganizationLevel.ZONE


def test_jamaat_mapping_takes_priority_over_direct_muqam(
    db, make_hierarchy, make_jamaat, make_member
):
    via_jamaat = make_hierarchy("Lagos")
    direct = make_hierarchy("Ibadan")
    make_jamaat(102, muqam=via_jamaat.muqam)
    member = make_member("10003", jamaat_id=102, muqam_id=direct.muqam.id)

    context = hierarchy_service.resolve_hierarchy(db, member)

    assert context.muqam_id == via_jamaat.muqam.id
    assert context.zone_id == via_jamaat.zone.id


def test_unmapped_jamaat_keeps_direct_muqam_without_walking(
    db, make_hierarchy, make_jamaat, make_member
):
    direct = make_hierarchy()
    make_jamaat(103)
    member = make_member("10004", jamaat_id=103, muqam_id=direct.muqam.id)

    context = hierarchy_service.resolve_hierarchy(db, member)

    assert context.muqam_id == direct.muqam.id
    assert context.dila_id is None
    assert context.zone_id is None
    assert context.organization_level == OrganizationLevel.MUQAM


def test_unknown_jamaat_keeps_direct_muqam_without_walking(db, make_hierarchy, make_member):
    direct = make_hierarchy()
    member = make_member("10010", jamaat_id=998, muqam_id=direct.muqam.id)

    context = hierarchy_service.resolve_hierarchy(db, member)

    assert context.muqam_id == direct.muqam.id
    assert context.dila_id is None
    assert context.organization_level == OrganizationLevel.MUQAM


def test_unknown_jamaat_without_muqam_resolves_to_nothing(db, make_member):
    member = make_member("10005", jamaat_id=999)

    context = hierarchy_service.resolve_hierarchy(db, member)

    assert context == hierarchy_service.HierarchyContext()


def test_muqam_without_dila_truncates_walk(db, make_hierarchy, make_jamaat, make_member):
    hierarchy = make_hierarchy(with_dila=False)
    make_jamaat(104, muqam=hierarchy.muqam)
    member = make_member("10006", jamaat_id=104)

    context = hierarchy_service.resolve_hierarchy(db, member)

    assert context.muqam_id == hierarchy.muqam.id
    assert context.dila_id is None
    assert context.zone_id is None
    assert context.organization_level == OrganizationLevel.MUQAM


def test_dila_without_zone_stops_at_dila(db, make_hierarchy):
    hierarchy = make_hierarchy(with_zone=False)
    hint = SimpleNamespace(jamaat_id=None, muqam_id=hierarchy.muqam.id)

    context = hierarchy_service.resolve_hierarchy(db, hint)

    assert context.dila_id == hierarchy.dila.id
    assert context.zone_id is None
    assert context.organization_level == OrganizationLevel.DILA


def test_dangling_dila_reference_keeps_muqam_and_dila(db):
    # SQLite does not enforce foreign keys here, so the dila can be missing
    muqam = Muqam(name="Orphan Muqam", dila_id=uuid.uuid4())
    db.add(muqam)
    db.commit()

    context = hierarchy_service.resolve_hierarchy(
        db, SimpleNamespace(jamaat_id=None, muqam_id=muqam.id)
    )

    assert context.muqam_id == muqam.id
    assert context.dila_id == muqam.dila_id
    assert context.zone_id is None
    assert context.organization_level == OrganizationLevel.DILA


def test_missing_muqam_keeps_only_muqam_id(db):
    missing = uuid.uuid4()

    context = hierarchy_service.resolve_hierarchy(
        db, SimpleNamespace(jamaat_id=None, muqam_id=missing)
    )

    assert context.muqam_id == missing
    assert context.dila_id is None
    assert context.organization_level == OrganizationLevel.MUQAM


def test_lookups(db, make_hierarchy, make_jamaat, make_member):
    hierarchy = make_hierarchy()
    jamaat = make_jamaat(107, muqam=hierarchy.muqam)
    make_member("10009")

    assert hierarchy_service.get_zone(db, hierarchy.zone.id) is hierarchy.zone
    assert hierarchy_service.get_dila(db, hierarchy.dila.id) is hierarchy.dila
    assert hierarchy_service.get_muqam(db, hierarchy.muqam.id) is hierarchy.muqam
    assert hierarchy_service.get_jamaat(db, jamaat.id) is jamaat
    assert hierarchy_service.get_jamaat_by_external_id(db, 107) is jamaat
    assert hierarchy_service.get_member_by_chanda_no(db, "10009").surname == "Adeyemi"
    assert hierarchy_service.get_zone(db, uuid.uuid4()) is None


def test_determine_organization_level_prefers_coarsest():
    ids = [uuid.uuid4() for _ in range(3)]

    assert hierarchy_service.determine_organization_level(*ids) == OrganizationLevel.ZONE
    assert hierarchy_service.determine_organization_level(ids[0], ids[1], None) == OrganizationLevel.DILA
    assert hierarchy_service.determine_organization_level(ids[0], None, None) == OrganizationLevel.MUQAM
    assert hierarchy_service.determine_organization_level(None, None, None) is None


def test_resolve_member_hierarchy_by_chanda_no(db, make_hierarchy, make_jamaat, make_member):
    hierarchy = make_hierarchy()
    make_jamaat(105, muqam=hierarchy.muqam)
    make_member("10007", jamaat_id=105)

    context = hierarchy_service.resolve_member_hierarchy(db, " 10007 ")

    assert context is not None
    assert context.zone_id == hierarchy.zone.id
    assert hierarchy_service.resolve_member_hierarchy(db, "does-not-exist") is None


def test_directory_statistics_counts_unassigned(db, make_hierarchy, make_jamaat, make_member):
    make_hierarchy("Lagos")
    make_hierarchy("Kano", with_zone=False)
    make_hierarchy("Abuja", with_dila=False)
    make_jamaat(106)
    make_member("10008")
    db.add(Dila(name="Loose Dila"))
    db.commit()

    stats = hierarchy_service.get_directory_statistics(db)

    assert stats.total_zones == 1
    assert stats.total_dilas == 3
    assert stats.total_muqams == 3
    assert stats.total_jamaats == 1
    assert stats.total_members == 1
    assert stats.unassigned_dilas == 2
    assert stats.unassigned_muqams == 1
