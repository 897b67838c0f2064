import pytest

from resource_versions.errors import CountError, StoreError
from resource_versions.services.count_service import count_versions, resource_prefix


def test_prefix_is_name_and_slash():
    assert resource_prefix("ab12") == "ab12/"


def test_no_matching_objects_counts_zero(store, queue_page):
    queue_page("ab12/", [])

    assert count_versions(store, "ab12") == 0


def test_single_page(store, queue_page):
    queue_page("ab12/", ["ab12/1.0.0", "ab12/1.1.0", "ab12/2.0.0"])

    assert count_versions(store, "ab12") == 3


def test_counts_entries_across_pages(store, stubber, queue_page):
    queue_page("ab12/", [f"ab12/{i}" for i in range(1000)], next_token="page-2")
    queue_page("ab12/", ["ab12/1000"], token="page-2")

    assert count_versions(store, "ab12") == 1001
    stubber.assert_no_pending_responses()


def test_store_failure_is_a_count_error(store, stubber):
    stubber.add_client_error("list_objects_v2", service_error_code="InternalError", http_status_code=500)

    with pytest.raises(CountError) as exc_info:
        count_versions(store, "ab12")

    assert exc_info.value.resource_name == "ab12"
    assert isinstance(exc_info.value.store_error, StoreError)


def test_failure_on_a_later_page_is_not_retried(store, stubber, queue_page):
    queue_page("ab12/", ["ab12/1"], next_token="page-2")
    stubber.add_client_error("list_objects_v2", service_error_code="SlowDown", http_status_code=503)

    with pytest.raises(CountError):
        count_versions(store, "ab12")

    stubber.assert_no_pending_responses()
