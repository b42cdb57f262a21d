"""Unit tests for GoogleHTTP."""

from unittest.mock import Mock, patch

import pytest
from googleapiclient.errors import HttpError

from mailbox_kit.core.errors import (
    DuplicateWatchError,
    InvalidStatusError,
    MissingAuthenticationError,
)
from mailbox_kit.core.google_http import GoogleHTTP, translate_http_error


def make_http_error(status: int, message: str) -> HttpError:
    content = ('{"error": {"code": %d, "message": "%s"}}' % (status, message)).encode("utf-8")
    return HttpError(Mock(status=status, reason="Error"), content)


@pytest.fixture
def google():
    return GoogleHTTP(watch_topic="projects/test/topics/gmail")


@pytest.fixture
def mock_build(mock_gmail_service):
    with patch("mailbox_kit.core.google_http.build", return_value=mock_gmail_service) as build:
        yield build


class TestAuthenticatedCalls:

    @pytest.mark.asyncio
    async def test_fetch_gmail_profile(self, google, auth, mock_build, mock_gmail_service):
        """Test a 200 response resolves with the payload."""
        result = await google.fetch_gmail_profile(auth)

        assert result["emailAddress"] == "test@example.com"
        mock_build.assert_called_once_with("gmail", "v1", credentials=auth, cache_discovery=False)
        mock_gmail_service.users().getProfile.assert_called_with(userId="me")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("call", [
        lambda google: google.fetch_gmail_profile(None),
        lambda google: google.fetch_account_profile(None),
        lambda google: google.fetch_gmail_label(None, "INBOX"),
        lambda google: google.fetch_gmail_thread_headers_list(None),
        lambda google: google.fetch_gmail_thread(None, "thread1"),
        lambda google: google.fetch_gmail_history_list(None, "100"),
        lambda google: google.watch_account(None),
        lambda google: google.fully_resolve_gmail_thread_headers(None, {}, []),
    ])
    async def test_missing_auth(self, google, mock_build, call):
        """Test calls without credentials fail before any network access."""
        with pytest.raises(MissingAuthenticationError, match="missing authentication"):
            await call(google)

        mock_build.assert_not_called()

    @pytest.mark.asyncio
    async def test_not_found_status(self, google, auth, mock_build, mock_gmail_service):
        """Test a 404 is raised as InvalidStatusError naming the status."""
        mock_gmail_service.users().threads().get.return_value.execute.side_effect = make_http_error(
            404, "Requested entity was not found."
        )

        with pytest.raises(InvalidStatusError, match="404") as excinfo:
            await google.fetch_gmail_thread(auth, "missing")

        assert excinfo.value.status == 404
        assert excinfo.value.reason == "Requested entity was not found."

    @pytest.mark.asyncio
    async def test_non_200_success_status(self, google, auth, mock_build, mock_gmail_service):
        """Test a 2xx response other than 200 is still rejected."""
        request = mock_gmail_service.users().labels().get.return_value
        request.execute.side_effect = lambda: request.postproc(Mock(status=204), b"")

        with pytest.raises(InvalidStatusError) as excinfo:
            await google.fetch_gmail_label(auth, "INBOX")

        assert excinfo.value.status == 204

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, google, auth, mock_build, mock_gmail_service):
        """Test transport failures reach the caller unchanged."""
        failure = ConnectionResetError("connection reset by peer")
        mock_gmail_service.users().getProfile.return_value.execute.side_effect = failure

        with pytest.raises(ConnectionResetError) as excinfo:
            await google.fetch_gmail_profile(auth)

        assert excinfo.value is failure

    @pytest.mark.asyncio
    async def test_fetch_account_profile_uses_oauth2(self, google, auth, mock_build, mock_gmail_service):
        mock_gmail_service.userinfo.return_value.get.return_value.execute.return_value = {
            "email": "test@example.com",
            "name": "Test User",
        }

        result = await google.fetch_account_profile(auth)

        assert result["email"] == "test@example.com"
        mock_build.assert_called_once_with("oauth2", "v2", credentials=auth, cache_discovery=False)

    @pytest.mark.asyncio
    async def test_fetch_account_profile_with_raw_auth(self, google, mock_build, mock_gmail_service):
        mock_gmail_service.userinfo.return_value.get.return_value.execute.return_value = {"id": "1"}

        await google.fetch_account_profile_with_raw_auth({
            "access_token": "access",
            "refresh_token": "refresh",
            "expires_in": 3600,
        })

        credentials = mock_build.call_args.kwargs["credentials"]
        assert credentials.token == "access"
        assert credentials.refresh_token == "refresh"
        assert credentials.expiry is not None

    @pytest.mark.asyncio
    async def test_fetch_thread_headers_list(self, google, auth, mock_build, mock_gmail_service):
        result = await google.fetch_gmail_thread_headers_list(auth, "is:unread", ["INBOX"], 10)

        assert [t["id"] for t in result["threads"]] == ["thread1", "thread2"]
        mock_gmail_service.users().threads().list.assert_called_with(
            userId="me", labelIds=["INBOX"], q="is:unread", maxResults=10
        )

    @pytest.mark.asyncio
    async def test_fetch_history_list(self, google, auth, mock_build, mock_gmail_service):
        mock_gmail_service.users().history.return_value.list.return_value.execute.return_value = {
            "history": [],
            "historyId": "4300",
        }

        result = await google.fetch_gmail_history_list(auth, "4242")

        assert result["historyId"] == "4300"
        mock_gmail_service.users().history().list.assert_called_with(userId="me", startHistoryId="4242")


class TestWatchAccount:

    @pytest.mark.asyncio
    async def test_watch_account(self, google, auth, mock_build, mock_gmail_service):
        mock_gmail_service.users().watch.return_value.execute.return_value = {
            "historyId": "4242",
            "expiration": "1700000000000",
        }

        result = await google.watch_account(auth)

        assert result["historyId"] == "4242"
        mock_gmail_service.users().watch.assert_called_with(
            userId="me", body={"topicName": "projects/test/topics/gmail"}
        )

    @pytest.mark.asyncio
    async def test_duplicate_watch_is_success(self, google, auth, mock_build, mock_gmail_service):
        """Test another connected push client is treated as a success."""
        mock_gmail_service.users().watch.return_value.execute.side_effect = make_http_error(
            400, "Only one user push notification client allowed per developer (call /stop then try again)"
        )

        assert await google.watch_account(auth) == {}

    @pytest.mark.asyncio
    async def test_other_watch_failure_propagates(self, google, auth, mock_build, mock_gmail_service):
        mock_gmail_service.users().watch.return_value.execute.side_effect = make_http_error(
            403, "User not authorized to perform this action."
        )

        with pytest.raises(InvalidStatusError) as excinfo:
            await google.watch_account(auth)

        assert excinfo.value.status == 403
        assert not isinstance(excinfo.value, DuplicateWatchError)

    def test_translate_http_error(self):
        duplicate = translate_http_error(make_http_error(
            400, "Only one user push notification client allowed per developer"
        ))
        other = translate_http_error(make_http_error(400, "Invalid topicName"))

        assert isinstance(duplicate, DuplicateWatchError)
        assert type(other) is InvalidStatusError
        assert other.status == 400


class TestFullyResolveThreadHeaders:

    @pytest.fixture
    def remote_threads(self):
        return {
            "A": {"id": "A", "historyId": "5", "messages": ["a-new"]},
            "B": {"id": "B", "historyId": "2", "messages": ["b"]},
            "C": {"id": "C", "historyId": "7", "messages": ["c"]},
        }

    @pytest.fixture
    def thread_get(self, mock_gmail_service, remote_threads):
        get = mock_gmail_service.users().threads().get
        get.side_effect = lambda userId, id: Mock(execute=Mock(return_value=remote_threads[id]))
        return get

    def fetched_ids(self, thread_get):
        return sorted(call.kwargs["id"] for call in thread_get.call_args_list)

    @pytest.mark.asyncio
    async def test_only_changed_threads_are_fetched(self, google, auth, mock_build, thread_get):
        known_a = {"id": "A", "historyId": "1", "messages": ["a"]}
        headers = [{"id": "A", "historyId": "1"}, {"id": "B", "historyId": "2"}]

        result = await google.fully_resolve_gmail_thread_headers(auth, {"A": known_a}, headers)

        assert result[0] is known_a
        assert result[1]["id"] == "B"
        assert result[1]["messages"] == ["b"]
        assert self.fetched_ids(thread_get) == ["B"]

    @pytest.mark.asyncio
    async def test_changed_history_id_is_refetched(self, google, auth, mock_build, thread_get):
        known = {"A": {"id": "A", "historyId": "1"}, "B": {"id": "B", "historyId": "2"}}
        headers = [{"id": "B", "historyId": "2"}, {"id": "A", "historyId": "5"}]

        result = await google.fully_resolve_gmail_thread_headers(auth, known, headers)

        assert [t["id"] for t in result] == ["B", "A"]
        assert result[1]["historyId"] == "5"
        assert result[0] is known["B"]
        assert self.fetched_ids(thread_get) == ["A"]

    @pytest.mark.asyncio
    async def test_unresolvable_headers_are_dropped(self, google, auth, mock_build, mock_gmail_service):
        """Test a header that is neither known nor fetched is omitted."""
        known = {"A": {"id": "A", "historyId": "1"}}
        headers = [{"id": "A", "historyId": "1"}, {"id": "X", "historyId": "9"}]

        with patch.object(GoogleHTTP, "fetch_multiple_gmail_threads", return_value=[]) as fetch:
            result = await google.fully_resolve_gmail_thread_headers(auth, known, headers)

        fetch.assert_called_once_with(auth, ["X"])
        assert result == [known["A"]]

    @pytest.mark.asyncio
    async def test_empty_known_thread_is_kept(self, google, auth, mock_build, thread_get):
        """Test a known entry is returned even when it is an empty mapping."""
        known = {"A": {}}
        headers = [{"id": "A"}, {"id": "B", "historyId": "2"}]

        result = await google.fully_resolve_gmail_thread_headers(auth, known, headers)

        assert result[0] is known["A"]
        assert result[1]["id"] == "B"
        assert self.fetched_ids(thread_get) == ["B"]

    @pytest.mark.asyncio
    async def test_post_process_applied_to_fetched_threads(self, google, auth, mock_build, thread_get):
        known_b = {"id": "B", "historyId": "2"}
        headers = [{"id": "C", "historyId": "7"}, {"id": "B", "historyId": "2"}]

        def post_process(thread):
            return {**thread, "processed": True}

        result = await google.fully_resolve_gmail_thread_headers(auth, {"B": known_b}, headers, post_process)

        assert result[0]["processed"] is True
        assert result[1] is known_b

    @pytest.mark.asyncio
    async def test_post_process_must_keep_identity(self, google, auth, mock_build, thread_get):
        headers = [{"id": "C", "historyId": "7"}]

        with pytest.raises(ValueError):
            await google.fully_resolve_gmail_thread_headers(
                auth, {}, headers, lambda thread: {**thread, "historyId": "0"}
            )

    @pytest.mark.asyncio
    async def test_any_failed_fetch_fails_the_batch(self, google, auth, mock_build, mock_gmail_service, remote_threads):
        def get(userId, id):
            if id == "C":
                return Mock(execute=Mock(side_effect=make_http_error(500, "Backend Error")))
            return Mock(execute=Mock(return_value=remote_threads[id]))

        mock_gmail_service.users().threads().get.side_effect = get
        headers = [{"id": "A", "historyId": "5"}, {"id": "C", "historyId": "7"}]

        with pytest.raises(InvalidStatusError) as excinfo:
            await google.fully_resolve_gmail_thread_headers(auth, {}, headers)

        assert excinfo.value.status == 500

    @pytest.mark.asyncio
    async def test_fetch_multiple_keeps_order(self, google, auth, mock_build, thread_get):
        result = await google.fetch_multiple_gmail_threads(auth, ["C", "A", "B"])

        assert [t["id"] for t in result] == ["C", "A", "B"]
