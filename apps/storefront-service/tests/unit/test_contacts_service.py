import pytest

from storefront import activity
from storefront.db import models, schemas
from storefront.db.repositories import contacts as contacts_repo
from storefront.services import contacts_service


def _activity_types(db_session, contact_id):
    return [a.activity_type for a in contacts_repo.list_activity(db_session, contact_id)]


def test_subscribe_creates_then_reactivates(db_session):
    first = contacts_service.subscribe_email(db_session, " Jane@Archies.co ", "footer", visitor_id="v1")
    assert first.created is True
    assert first.contact.email == "jane@archies.co"
    assert first.contact.source == "footer"
    assert first.contact.email_consent_at is not None

    first.contact.email_status = "inactive"
    db_session.commit()

    second = contacts_service.subscribe_email(db_session, "jane@archies.co", None)
    assert second.created is False
    assert second.contact.id == first.contact.id
    assert second.contact.email_status == "active"
    assert second.contact.visitor_id == "v1"
    assert set(_activity_types(db_session, first.contact.id)) == {
        activity.ActivityType.EMAIL_SUBSCRIBE.value,
        activity.ActivityType.EMAIL_RESUBSCRIBE.value,
    }


@pytest.mark.parametrize("email,message", [(None, "Email is required"), ("not-an-email", "Invalid email format")])
def test_subscribe_rejects_bad_email(db_session, email, message):
    with pytest.raises(contacts_service.ContactError, match=message):
        contacts_service.subscribe_email(db_session, email)


def test_capture_contact_merges_channels(db_session):
    created = contacts_service.capture_contact(db_session, "jane@archies.co", None)
    assert created.created and created.contact.sms_status == "none"

    merged = contacts_service.capture_contact(db_session, "jane@archies.co", "(555) 123-4567")
    assert merged.created is False
    assert merged.contact.id == created.contact.id
    assert merged.contact.phone == "5551234567"
    assert merged.contact.sms_status == "active"
    assert db_session.query(models.Contact).count() == 1


def test_capture_contact_validation(db_session):
    with pytest.raises(contacts_service.ContactError, match="Email or phone"):
        contacts_service.capture_contact(db_session, None, None)
    with pytest.raises(contacts_service.ContactError, match="valid phone"):
        contacts_service.capture_contact(db_session, None, "555-1234")


@pytest.mark.parametrize(
    "popup_type,popup_id,source,expected",
    [
        ("welcome", None, None, "welcome_popup"),
        ("exit", "p1", None, "exit_popup"),
        ("custom", "p1", None, "custom_popup_p1"),
        ("custom", None, "landing", "landing"),
        ("custom", None, None, "popup"),
    ],
)
def test_popup_source(popup_type, popup_id, source, expected):
    assert contacts_service.popup_source(popup_type, popup_id, source) == expected


def test_submit_popup_email_records_activity_and_conversion(db_session, popup_factory):
    popup = popup_factory(cta_type="download")
    submission = schemas.PopupSubmit.model_validate({
        "popupType": "custom",
        "popupId": popup.id,
        "ctaType": "email",
        "email": "Jane@Archies.co",
        "downloadFileUrl": "https://cdn.example.com/guide.pdf",
        "downloadFileName": "guide.pdf",
    })
    contact_id = contacts_service.submit_popup(db_session, submission, visitor_id="v1", session_id="s1")

    contact = db_session.get(models.Contact, contact_id)
    assert contact.source == f"custom_popup_{popup.id}"
    assert contact.source_popup_id == popup.id
    activities = contacts_repo.list_activity(db_session, contact_id)
    assert activities[0].activity_type == "popup_submit"
    assert activities[0].download_file_name == "guide.pdf"
    db_session.refresh(popup)
    assert popup.conversion_count == 1


def test_submit_popup_sms_reuses_contact_by_phone(db_session, contact_factory):
    existing = contact_factory(phone="5551234567")
    submission = schemas.PopupSubmit.model_validate({
        "popupType": "welcome", "ctaType": "sms", "phone": "555-123-4567",
    })
    assert contacts_service.submit_popup(db_session, submission) == existing.id
    db_session.refresh(existing)
    assert existing.sms_consent_at is not None


def test_submit_popup_unknown_popup_id_is_not_linked(db_session):
    submission = schemas.PopupSubmit.model_validate({
        "popupType": "custom", "popupId": "missing", "ctaType": "email", "email": "new@archies.co",
    })
    contact_id = contacts_service.submit_popup(db_session, submission)
    assert db_session.get(models.Contact, contact_id).source_popup_id is None


def test_track_popup_counts_views_only(db_session, popup_factory):
    popup = popup_factory()
    contacts_service.track_popup(db_session, schemas.PopupTrack(popup_id=popup.id, popup_type="custom", action="view"))
    contacts_service.track_popup(db_session, schemas.PopupTrack(popup_id=popup.id, popup_type="custom", action="dismiss"))
    db_session.refresh(popup)
    assert popup.view_count == 1


def test_admin_create_contact_rejects_duplicates(db_session, contact_factory):
    contact_factory(email="jane@archies.co")
    with pytest.raises(contacts_service.DuplicateContactError):
        contacts_service.create_contact(db_session, schemas.ContactCreate(email="JANE@archies.co"))


def test_export_csv_has_header_and_rows(db_session, contact_factory):
    contact_factory(email="jane@archies.co", first_name="Jane", last_name='Doe "JJ", Jr')
    csv_text = contacts_service.export_csv(db_session.query(models.Contact).all())
    lines = csv_text.strip().splitlines()
    assert lines[0].split(",")[:2] == contacts_service.EXPORT_HEADERS[:2]
    assert "jane@archies.co" in lines[1]
    assert '"Doe ""JJ"", Jr"' in lines[1]


def test_import_csv_creates_updates_and_skips(db_session, contact_factory):
    contact_factory(email="jane@archies.co")
    csv_text = (
        "\ufeffEmail,Phone Number,First Name,Email Status\n"
        "jane@archies.co,555-123-4567,Jane,bogus\n"
        "sam@archies.co,,Sam,inactive\n"
        ",,Nobody,\n"
        "broken-email,,Broken,\n"
    )
    result = contacts_service.import_csv(db_session, csv_text)
    assert (result.created, result.updated, result.skipped) == (1, 1, 2)
    assert result.errors == ["Row 5: invalid email broken-email"]

    jane = contacts_repo.get_contact_by_email(db_session, "jane@archies.co")
    assert jane.phone == "5551234567"
    assert jane.first_name == "Jane"
    sam = contacts_repo.get_contact_by_email(db_session, "sam@archies.co")
    assert sam.email_status == "inactive"
    assert sam.source == "import"


def test_import_csv_requires_a_channel_column(db_session):
    result = contacts_service.import_csv(db_session, "First Name\nJane\n")
    assert result.errors == ["CSV must include an email or phone column"]
