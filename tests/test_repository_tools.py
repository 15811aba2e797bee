import pytest

from github_tools_mcp.main_tools import branches, commits, pull_requests, querying, repositories


@pytest.mark.asyncio
async def test_search_repositories_maps_query(recording_client):
    client = recording_client({"total_count": 0, "items": []})

    await repositories.search_repositories(client, query="mcp language:python", page=2, perPage=30)

    assert client.calls[0]["path"] == "/search/repositories"
    assert client.calls[0]["params"] == {"q": "mcp language:python", "page": 2, "per_page": 30}


@pytest.mark.asyncio
async def test_create_repository_maps_auto_init(recording_client):
    client = recording_client({"full_name": "me/new"})

    await repositories.create_repository(client, name="new", private=True, autoInit=True)

    assert client.calls[0]["path"] == "/user/repos"
    assert client.calls[0]["body"] == {"name": "new", "private": True, "auto_init": True}


@pytest.mark.asyncio
async def test_fork_repository_into_organization(recording_client):
    client = recording_client({"full_name": "org/demo"})

    await repositories.fork_repository(client, owner="octo", repo="demo", organization="org")

    assert client.calls[0]["method"] == "POST"
    assert client.calls[0]["path"] == "/repos/octo/demo/forks"
    assert client.calls[0]["params"] == {"organization": "org"}


@pytest.mark.asyncio
async def test_create_branch_from_named_branch(recording_client):
    client = recording_client({"object": {"sha": "dev-sha"}}, {"ref": "refs/heads/feature"})

    await branches.create_branch(client, owner="octo", repo="demo", branch="feature", from_branch="dev")

    assert client.calls[0]["path"] == "/repos/octo/demo/git/refs/heads/dev"
    assert client.calls[1]["body"] == {"ref": "refs/heads/feature", "sha": "dev-sha"}


@pytest.mark.asyncio
async def test_create_branch_defaults_to_repository_default_branch(recording_client):
    client = recording_client(
        {"default_branch": "trunk"},
        {"object": {"sha": "trunk-sha"}},
        {"ref": "refs/heads/feature"},
    )

    await branches.create_branch(client, owner="octo", repo="demo", branch="feature")

    assert [c["path"] for c in client.calls] == [
        "/repos/octo/demo",
        "/repos/octo/demo/git/refs/heads/trunk",
        "/repos/octo/demo/git/refs",
    ]
    assert client.calls[2]["body"]["sha"] == "trunk-sha"


@pytest.mark.asyncio
async def test_list_commits(recording_client):
    client = recording_client([])

    await commits.list_commits(client, owner="octo", repo="demo", sha="dev", perPage=5)

    assert client.calls[0]["path"] == "/repos/octo/demo/commits"
    assert client.calls[0]["params"] == {"sha": "dev", "page": None, "per_page": 5}


@pytest.mark.asyncio
async def test_search_endpoints(recording_client):
    client = recording_client({}, {}, {})

    await querying.search_code(client, q="todo repo:octo/demo")
    await querying.search_issues(client, q="is:open", sort="comments", order="desc")
    await querying.search_users(client, q="octo", sort="followers", per_page=3)

    assert [c["path"] for c in client.calls] == ["/search/code", "/search/issues", "/search/users"]
    assert client.calls[1]["params"]["sort"] == "comments"
    assert client.calls[2]["params"]["per_page"] == 3


@pytest.mark.asyncio
async def test_create_pull_request_payload(recording_client):
    client = recording_client({"number": 12})

    await pull_requests.create_pull_request(
        client, owner="octo", repo="demo", title="Feature", head="feature", base="main", draft=True
    )

    assert client.calls[0]["body"] == {"title": "Feature", "head": "feature", "base": "main", "draft": True}


@pytest.mark.asyncio
async def test_list_pull_requests_forwards_filters(recording_client):
    client = recording_client([])

    await pull_requests.list_pull_requests(client, owner="octo", repo="demo", state="closed", sort="long-running")

    params = client.calls[0]["params"]
    assert params["state"] == "closed"
    assert params["sort"] == "long-running"


@pytest.mark.asyncio
async def test_create_review_with_comments(recording_client):
    client = recording_client({"id": 1})
    comments = [{"path": "a.py", "position": 3, "body": "nit"}]

    await pull_requests.create_pull_request_review(
        client, owner="octo", repo="demo", pull_number=12, body="Looks good", event="APPROVE", comments=comments
    )

    assert client.calls[0]["path"] == "/repos/octo/demo/pulls/12/reviews"
    assert client.calls[0]["body"] == {"body": "Looks good", "event": "APPROVE", "comments": comments}


@pytest.mark.asyncio
async def test_merge_pull_request_uses_put(recording_client):
    client = recording_client({"merged": True})

    await pull_requests.merge_pull_request(client, owner="octo", repo="demo", pull_number=12, merge_method="squash")

    assert client.calls[0]["method"] == "PUT"
    assert client.calls[0]["path"] == "/repos/octo/demo/pulls/12/merge"
    assert client.calls[0]["body"] == {"merge_method": "squash"}


@pytest.mark.asyncio
async def test_pull_request_status_reads_head_sha_first(recording_client):
    client = recording_client({"head": {"sha": "head-sha"}}, {"state": "success"})

    result = await pull_requests.get_pull_request_status(client, owner="octo", repo="demo", pull_number=12)

    assert result == {"state": "success"}
    assert client.calls[1]["path"] == "/repos/octo/demo/commits/head-sha/status"


@pytest.mark.asyncio
async def test_update_pull_request_branch_reports_success(recording_client):
    client = recording_client({"message": "Updating pull request branch."})

    result = await pull_requests.update_pull_request_branch(
        client, owner="octo", repo="demo", pull_number=12, expected_head_sha="abc"
    )

    assert result == {"success": True}
    assert client.calls[0]["method"] == "PUT"
    assert client.calls[0]["body"] == {"expected_head_sha": "abc"}


@pytest.mark.asyncio
async def test_pull_request_read_endpoints(recording_client):
    client = recording_client({}, [], [], [])

    await pull_requests.get_pull_request(client, owner="octo", repo="demo", pull_number=1)
    await pull_requests.get_pull_request_files(client, owner="octo", repo="demo", pull_number=1)
    await pull_requests.get_pull_request_comments(client, owner="octo", repo="demo", pull_number=1)
    await pull_requests.get_pull_request_reviews(client, owner="octo", repo="demo", pull_number=1)

    assert [c["path"] for c in client.calls] == [
        "/repos/octo/demo/pulls/1",
        "/repos/octo/demo/pulls/1/files",
        "/repos/octo/demo/pulls/1/comments",
        "/repos/octo/demo/pulls/1/reviews",
    ]
