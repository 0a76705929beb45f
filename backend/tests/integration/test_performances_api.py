"""
Integration tests for Performances API endpoints.

Tests end-to-end flows for performances:
- Batch reordering with partial failures
- Item number reconciliation
- Withdrawal/restore and status changes
"""


class TestReorderAPI:
    """Integration tests for PUT /api/performances/reorder"""

    def test_swap(self, test_client, admin_headers, sample_event, sample_performance):
        """Test swapping two performances"""
        event = sample_event()
        first = sample_performance(event=event, item_number=1)
        second = sample_performance(event=event, item_number=2)

        response = test_client.put(
            "/api/performances/reorder",
            json={
                "eventId": event.guid,
                "performances": [
                    {"id": first.guid, "itemNumber": 2},
                    {"id": second.guid, "itemNumber": 1},
                ],
            },
            headers=admin_headers,
        )
        assert response.status_code == 200

        data = response.json()
        assert data["updatedCount"] == 2
        assert data["failed"] == []

    def test_partial_failure(self, test_client, admin_headers, sample_event, sample_performance):
        """Test blocked items are listed while the rest apply"""
        event = sample_event()
        holder = sample_performance(event=event, item_number=1)
        mover = sample_performance(event=event, item_number=2)
        other = sample_performance(event=event, item_number=3)

        response = test_client.put(
            "/api/performances/reorder",
            json={
                "eventId": event.guid,
                "performances": [
                    {"id": mover.guid, "itemNumber": 1},
                    {"id": other.guid, "itemNumber": 7},
                ],
            },
            headers=admin_headers,
        )
        assert response.status_code == 200

        data = response.json()
        assert data["updatedCount"] == 1
        assert data["failed"] == [{
            "id": mover.guid,
            "itemNumber": 1,
            "reason": f"Item number 1 is already assigned to entry {holder.entry.guid}",
        }]

    def test_unknown_event(self, test_client, admin_headers):
        """Test an unknown event returns 404"""
        response = test_client.put(
            "/api/performances/reorder",
            json={
                "eventId": "evt_01hg02bbg00000000000000002",
                "performances": [{"id": "prf_01hg02bbg00000000000000003", "itemNumber": 1}],
            },
            headers=admin_headers,
        )
        assert response.status_code == 404

    def test_empty_batch_rejected(self, test_client, admin_headers, sample_event):
        """Test an empty batch fails request validation"""
        response = test_client.put(
            "/api/performances/reorder",
            json={"eventId": sample_event().guid, "performances": []},
            headers=admin_headers,
        )
        assert response.status_code == 422


class TestSyncAPI:
    """Integration tests for POST /api/performances/sync-item-numbers"""

    def test_sync(self, test_client, admin_headers, sample_entry, sample_performance):
        """Test drifted performances are reconciled once"""
        sample_performance(entry=sample_entry(item_number=6), item_number=None)

        first = test_client.post("/api/performances/sync-item-numbers", headers=admin_headers)
        second = test_client.post("/api/performances/sync-item-numbers", headers=admin_headers)

        assert first.status_code == 200
        assert first.json() == {"checkedCount": 1, "syncedCount": 1, "failed": []}
        assert second.json()["syncedCount"] == 0


class TestWithdrawalAPI:
    """Integration tests for POST /api/performances/{id}/withdrawal"""

    def test_withdraw_and_restore(self, test_client, admin_headers, sample_performance):
        """Test toggling withdrawal"""
        performance = sample_performance()

        response = test_client.post(
            f"/api/performances/{performance.guid}/withdrawal",
            json={"action": "withdraw"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["withdrawnFromJudging"] is True

        response = test_client.post(
            f"/api/performances/{performance.guid}/withdrawal",
            json={"action": "restore"},
            headers=admin_headers,
        )
        assert response.json()["withdrawnFromJudging"] is False

    def test_invalid_action(self, test_client, admin_headers, sample_performance):
        """Test unknown actions are rejected"""
        performance = sample_performance()

        response = test_client.post(
            f"/api/performances/{performance.guid}/withdrawal",
            json={"action": "remove"},
            headers=admin_headers,
        )
        assert response.status_code == 400


class TestStatusAPI:
    """Integration tests for PUT /api/performances/{id}/status"""

    def test_transition(self, test_client, admin_headers, sample_performance):
        """Test an allowed transition"""
        performance = sample_performance()

        response = test_client.put(
            f"/api/performances/{performance.guid}/status",
            json={"status": "in_progress"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "in_progress"

    def test_disallowed_transition(self, test_client, admin_headers, sample_performance):
        """Test a cancelled performance cannot restart"""
        performance = sample_performance(status="cancelled")

        response = test_client.put(
            f"/api/performances/{performance.guid}/status",
            json={"status": "scheduled"},
            headers=admin_headers,
        )
        assert response.status_code == 400
