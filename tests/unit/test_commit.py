from spaceops.ingest.commit import CommitFeedback, ImportCommitClient, operator_messages


class FakeHttp:
    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    def post_text_json(self, url, *, body, params=None):
        self.calls.append({"url": url, "body": body, "params": params})
        return self.payload


def test_commit_posts_text_with_platform_and_file_name():
    http = FakeHttp({"inserted": 3, "skipped": 1, "unmapped": [], "warnings": []})
    client = ImportCommitClient("https://ops.example/", http)

    feedback = client.commit("予約ID\n1\n", platform_code="spacee", file_name="march.csv")

    assert http.calls == [
        {
            "url": "https://ops.example/api/import/csv",
            "body": "予約ID\n1\n",
            "params": {"platformCode": "spacee", "fileName": "march.csv"},
        }
    ]
    assert feedback.inserted == 3
    assert not feedback.is_partial


def test_feedback_from_payload_is_lenient():
    feedback = CommitFeedback.from_payload({"inserted": "x", "unmapped": None, "extra": True})
    assert feedback.inserted == 0
    assert feedback.unmapped == []


def test_commit_non_mapping_payload_is_empty_feedback():
    feedback = ImportCommitClient("https://ops.example", FakeHttp(["unexpected"])).commit(
        "", platform_code="generic", file_name="a.csv"
    )
    assert feedback == CommitFeedback()


def test_operator_messages():
    feedback = CommitFeedback(inserted=5, skipped=2, unmapped=["謎の施設"], warnings=["行3: 注意"])
    assert feedback.is_partial
    assert operator_messages(feedback) == [
        "5件を取り込みました",
        "未マッピング施設: 謎の施設",
        "行3: 注意",
        "2件の重複データをスキップしました",
    ]
