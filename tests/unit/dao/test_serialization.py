"""Unit tests for dump_state() / load_state() in serialization.py.

Test coverage includes:

1. Document layout
   - Ensures state is dumped under the 'shortened_urls' / 'url_clicks' keys.

2. Round-trip
   - Ensures dump then load yields identical records and click order.

3. Corrupted documents
   - Ensures malformed documents raise DataStoreError.
"""

import pytest

from urlregistry.dao.exceptions import DataStoreError
from urlregistry.dao.serialization import dump_state, load_state


def test_dump_state_layout(record, clicks):
    document = dump_state([record], {'abc123': clicks})

    assert list(document) == ['shortened_urls', 'url_clicks']
    assert document['shortened_urls'] == [record.to_dict()]
    assert document['url_clicks'] == {'abc123': [click.to_dict() for click in clicks]}


def test_round_trip_preserves_order(record, clicks):
    assert load_state(dump_state([record], {'abc123': clicks})) == ([record], {'abc123': clicks})


def test_load_state_tolerates_missing_keys():
    assert load_state({}) == ([], {})


@pytest.mark.parametrize(
    'document',
    [
        [],
        'state',
        {'shortened_urls': [{'shortcode': 'abc123'}]},
        {'shortened_urls': ['not-a-mapping']},
        {'url_clicks': {'abc123': [{'timestamp': 'yesterday', 'source': 'direct', 'location': 'x'}]}},
        {'url_clicks': ['abc123']},
    ],
)
def test_load_state_rejects_corrupted_documents(document):
    with pytest.raises(DataStoreError):
        load_state(document)
