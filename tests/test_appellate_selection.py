from complaint_engine.config.settings import Settings
from complaint_engine.services.complaint.complaint_escalation_service import AppellateAuthoritySelector


def selector(services, **overrides):
    settings = Settings(LOG_TO_FILE=False, **overrides)
    return AppellateAuthoritySelector(services.user_repo, services.complaint_repo, settings)


def test_first_approved_picks_oldest_super_admin(services, users):
    assert selector(services).select() == users["super_admin"].id


def test_configured_authority(services, users):
    chosen = selector(
        services,
        APPELLATE_AUTHORITY_STRATEGY="configured",
        APPELLATE_AUTHORITY_ID=users["second_super_admin"].id,
    ).select()

    assert chosen == users["second_super_admin"].id


def test_configured_non_super_admin_falls_back(services, users):
    chosen = selector(
        services,
        APPELLATE_AUTHORITY_STRATEGY="configured",
        APPELLATE_AUTHORITY_ID=users["electrical_admin"].id,
    ).select()

    assert chosen == users["super_admin"].id


def test_round_robin_rotates(submit, advance, services, principals, users):
    rotation = selector(services, APPELLATE_AUTHORITY_STRATEGY="round_robin")
    assert rotation.select() == users["super_admin"].id

    complaint = submit()
    advance(complaint.id, "resolved")
    services.feedback().submit_feedback(principals["resident"], complaint.id, 1).unwrap()

    assert rotation.select() == users["second_super_admin"].id
