from types import SimpleNamespace

import pytest

from chefportal.services.status_labels import (
    COMPLETE,
    DOCKET_FILTERS,
    IN_PROGRESS,
    NEARLY_DONE,
    NOT_STARTED,
    STARTED,
    classify_contract,
    classify_progress,
    classify_work_permit,
)


def _contract(**overrides):
    fields = {
        "company_contract_original_url": None,
        "company_contract_signed_url": None,
        "company_contract_status": "not-started",
        "job_offer_original_url": None,
        "job_offer_signed_url": None,
        "job_offer_status": "not-started",
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestClassifyProgress:
    @pytest.mark.parametrize("percentage, expected", [
        (100.0, COMPLETE),
        (100.0 * 8 / 9, NEARLY_DONE),
        (70.0, IN_PROGRESS),
        (100.0 * 3 / 9, IN_PROGRESS),
        (30.0, STARTED),
        (100.0 / 9, STARTED),
        (0.0, NOT_STARTED),
    ])
    def test_thresholds(self, percentage, expected):
        assert classify_progress(percentage) == expected

    def test_colors(self):
        assert classify_progress(100).color == "green"
        assert classify_progress(80).color == "blue"
        assert classify_progress(50).color == "orange"
        assert classify_progress(10).color == "yellow"
        assert classify_progress(0).color == "gray"

    def test_docket_filters(self):
        assert DOCKET_FILTERS["completed"](100)
        assert DOCKET_FILTERS["in-progress"](50)
        assert not DOCKET_FILTERS["in-progress"](0)
        assert DOCKET_FILTERS["not-started"](0)
        assert DOCKET_FILTERS["nearly-done"](100.0 * 7 / 9)


class TestClassifyContract:
    def test_none_contract(self):
        assert classify_contract(None) == NOT_STARTED

    def test_originals_only_is_pending(self):
        contract = _contract(
            company_contract_original_url="/c.pdf", company_contract_status="pending",
            job_offer_original_url="/j.pdf", job_offer_status="pending",
        )
        assert classify_contract(contract).label == "Pending"

    def test_one_signed_is_in_progress(self):
        contract = _contract(
            company_contract_original_url="/c.pdf",
            company_contract_signed_url="/cs.pdf",
            company_contract_status="signed",
            job_offer_original_url="/j.pdf",
            job_offer_status="pending",
        )
        assert classify_contract(contract).label == "In Progress"

    def test_both_signed_is_completed(self):
        contract = _contract(
            company_contract_signed_url="/cs.pdf", company_contract_status="signed",
            job_offer_signed_url="/js.pdf", job_offer_status="signed",
        )
        label = classify_contract(contract)
        assert label.label == "Completed"
        assert label.color == "green"

    def test_rejected_signature_does_not_count(self):
        contract = _contract(
            company_contract_signed_url="/cs.pdf", company_contract_status="rejected",
            job_offer_signed_url="/js.pdf", job_offer_status="signed",
        )
        assert classify_contract(contract).label == "In Progress"


class TestClassifyWorkPermit:
    @pytest.mark.parametrize("status, label", [
        ("preparation", "Preparation"),
        ("applied", "Applied"),
        ("awaiting_decision", "Awaiting Embassy Decision"),
        ("approved", "Approved"),
        ("rejected", "Rejected"),
    ])
    def test_labels(self, status, label):
        assert classify_work_permit(SimpleNamespace(status=status)).label == label

    def test_none_permit(self):
        assert classify_work_permit(None) == NOT_STARTED
