from chefportal.services.docket_progress import (
    CANDIDATE_CHECKLIST,
    LEGACY_ADMIN_CHECKLIST,
    calculate_progress,
    can_submit,
    missing_items,
)
from chefportal.services.status_labels import classify_progress

FILE = {"name": "a.pdf", "url": "/api/files/users/u/docket/a.pdf", "size": 10}
REF = {"full_name": "A", "company": "B", "designation": "C", "phone": "1", "email": "a@b.com"}


def _full_docket() -> dict:
    return {
        "passportFrontUrl": "u1",
        "passportPhotoUrl": "u2",
        "resumeUrl": "u3",
        "educationFiles": [FILE],
        "experienceFiles": [FILE],
        "offerLetterUrl": "u4",
        "permanentAddressUrl": "u5",
        "otherCertifications": [FILE],
        "references": [REF, REF],
    }


class TestCalculateProgress:
    def test_none_docket(self):
        p = calculate_progress(None)
        assert (p.completed, p.total, p.percentage) == (0, 9, 0.0)

    def test_empty_docket(self):
        p = calculate_progress({})
        assert p.completed == 0
        assert p.percentage == 0.0

    def test_full_docket(self):
        p = calculate_progress(_full_docket())
        assert p.completed == 9
        assert p.percentage == 100.0

    def test_percentage_is_not_rounded(self):
        docket = {"passportFrontUrl": "u1"}
        p = calculate_progress(docket)
        assert p.completed == 1
        assert p.percentage == 100.0 / 9

    def test_front_and_resume_only_is_started(self):
        p = calculate_progress({"passportFrontUrl": "u1", "resumeUrl": "u2"})
        assert (p.completed, p.total) == (2, 9)
        assert round(p.percentage, 1) == 22.2
        assert classify_progress(p.percentage).label == "Started"

    def test_single_reference_does_not_count(self):
        docket = _full_docket()
        docket["references"] = [REF]
        assert calculate_progress(docket).completed == 8
        docket["references"] = [REF, REF]
        assert calculate_progress(docket).completed == 9

    def test_empty_strings_and_lists_are_absent(self):
        docket = _full_docket()
        docket["resumeUrl"] = ""
        docket["educationFiles"] = []
        assert calculate_progress(docket).completed == 7

    def test_monotonic_when_fields_are_added(self):
        docket = {}
        previous = calculate_progress(docket).completed
        for key, value in _full_docket().items():
            docket[key] = value
            current = calculate_progress(docket).completed
            assert current >= previous
            previous = current

    def test_snake_case_keys(self):
        docket = {"passport_front_url": "u1", "resume_url": "u2"}
        assert calculate_progress(docket).completed == 2

    def test_object_attributes(self):
        class Row:
            passport_front_url = "u1"
            references = [REF, REF]

        assert calculate_progress(Row()).completed == 2

    def test_unknown_fields_are_ignored(self):
        docket = {"passportLastUrl": "x", "currentAddressUrl": "y", "passportVisaUrls": ["z"]}
        assert calculate_progress(docket).completed == 0


class TestChecklists:
    def test_candidate_checklist_has_nine_items(self):
        assert len(CANDIDATE_CHECKLIST) == 9
        assert len({item.key for item in CANDIDATE_CHECKLIST}) == 9

    def test_legacy_admin_checklist_swaps_certifications_for_passport_last(self):
        keys = [item.key for item in LEGACY_ADMIN_CHECKLIST]
        assert len(keys) == 9
        assert "passportLastUrl" in keys
        assert "otherCertifications" not in keys

        docket = {"passportLastUrl": "x", "otherCertifications": [FILE]}
        assert calculate_progress(docket, LEGACY_ADMIN_CHECKLIST).completed == 1
        assert calculate_progress(docket, CANDIDATE_CHECKLIST).completed == 1

    def test_missing_items_lists_labels(self):
        docket = _full_docket()
        del docket["resumeUrl"]
        assert missing_items(docket) == ["Resume"]
        assert len(missing_items(None)) == 9

    def test_can_submit_threshold(self):
        docket = _full_docket()
        for key in ("resumeUrl", "offerLetterUrl", "permanentAddressUrl"):
            del docket[key]
        assert can_submit(calculate_progress(docket))
        del docket["passportFrontUrl"]
        assert not can_submit(calculate_progress(docket))
