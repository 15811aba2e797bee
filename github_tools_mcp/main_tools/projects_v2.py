"""Projects (v2) over the GraphQL API.

Field values are written through a closed set of shapes. ``classify_field_value``
decides the shape from the Python type of the incoming value and rejects
everything else before any request is made.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from github_tools_mcp.exceptions import GitHubValidationError
from github_tools_mcp.mcp_server.decorators import mcp_tool
from github_tools_mcp.mcp_server.schemas import (
    any_field,
    boolean_field,
    enum_field,
    integer_field,
    object_schema,
    string_field,
    tool_input_schema,
)

from ._shared import github_operation

DEFAULT_PAGE_SIZE = 20

PROJECT_NODE_ID = string_field("The node ID of the project")
FIRST = integer_field("Number of results to fetch (max 100)", minimum=1, maximum=100)
AFTER = string_field("Cursor for pagination")

_PROJECT_FIELDS = """
            id
            title
            shortDescription
            url
            closed
            createdAt
            updatedAt
            number
"""

LIST_ORGANIZATION_PROJECTS_QUERY = """
query($org: String!, $first: Int!, $after: String, $orderBy: ProjectV2Order) {
  organization(login: $org) {
    projectsV2(first: $first, after: $after, orderBy: $orderBy) {
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {%s      }
    }
  }
}
""" % _PROJECT_FIELDS

GET_PROJECT_QUERY = """
query($id: ID!) {
  node(id: $id) {
    ... on ProjectV2 {%s
      owner {
        __typename
        ... on Organization { login }
        ... on User { login }
      }
      fields(first: 20) {
        nodes {
          ... on ProjectV2Field {
            id
            name
          }
          ... on ProjectV2SingleSelectField {
            id
            name
            options { id name color }
          }
        }
      }
      views(first: 20) {
        nodes { id name layout }
      }
    }
  }
}
""" % _PROJECT_FIELDS

CREATE_PROJECT_MUTATION = """
mutation($input: CreateProjectV2Input!) {
  createProjectV2(input: $input) {
    projectV2 {%s    }
  }
}
""" % _PROJECT_FIELDS

UPDATE_PROJECT_MUTATION = """
mutation($input: UpdateProjectV2Input!) {
  updateProjectV2(input: $input) {
    projectV2 {%s    }
  }
}
""" % _PROJECT_FIELDS

ADD_ITEM_MUTATION = """
mutation($input: AddProjectV2ItemByIdInput!) {
  addProjectV2ItemById(input: $input) {
    item {
      id
      content {
        ... on Issue { id title number }
        ... on PullRequest { id title number }
      }
    }
  }
}
"""

LIST_ITEMS_QUERY = """
query($projectId: ID!, $first: Int!, $after: String) {
  node(id: $projectId) {
    ... on ProjectV2 {
      items(first: $first, after: $after) {
        pageInfo {
          hasNextPage
          endCursor
        }
        nodes {
          id
          content {
            ... on Issue { id title number state }
            ... on PullRequest { id title number state }
          }
          fieldValues(first: 20) {
            nodes {
              ... on ProjectV2ItemFieldTextValue {
                field { ... on ProjectV2FieldCommon { name id } }
                text
              }
              ... on ProjectV2ItemFieldDateValue {
                field { ... on ProjectV2FieldCommon { name id } }
                date
              }
              ... on ProjectV2ItemFieldSingleSelectValue {
                field { ... on ProjectV2FieldCommon { name id } }
                name
              }
              ... on ProjectV2ItemFieldNumberValue {
                field { ... on ProjectV2FieldCommon { name id } }
                number
              }
            }
          }
        }
      }
    }
  }
}
"""

UPDATE_ITEM_FIELD_MUTATION = """
mutation($input: UpdateProjectV2ItemFieldValueInput!) {
  updateProjectV2ItemFieldValue(input: $input) {
    projectV2Item {
      id
    }
  }
}
"""


# Field values
# ------------------------------------------------------------------------------


@dataclass(frozen=True)
class TextFieldValue:
    text: str

    def to_input(self) -> Dict[str, Any]:
        return {"text": self.text}


@dataclass(frozen=True)
class DateFieldValue:
    date: str

    def to_input(self) -> Dict[str, Any]:
        return {"date": self.date}


@dataclass(frozen=True)
class SingleSelectFieldValue:
    option_id: str

    def to_input(self) -> Dict[str, Any]:
        return {"singleSelectOptionId": self.option_id}


@dataclass(frozen=True)
class NumberFieldValue:
    number: float

    def to_input(self) -> Dict[str, Any]:
        return {"number": self.number}


FieldValue = Union[TextFieldValue, DateFieldValue, SingleSelectFieldValue, NumberFieldValue]


def classify_field_value(value: Any) -> FieldValue:
    if isinstance(value, str):
        return TextFieldValue(value)
    if isinstance(value, datetime.datetime):
        return DateFieldValue(value.date().isoformat())
    if isinstance(value, datetime.date):
        return DateFieldValue(value.isoformat())
    if isinstance(value, Mapping) and value.get("optionId"):
        return SingleSelectFieldValue(str(value["optionId"]))
    # bool is an int subclass but never a number field.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return NumberFieldValue(value)

    type_name = type(value).__name__
    raise GitHubValidationError(
        f"Unsupported field value type: {type_name}",
        400,
        {"error": "Unsupported field value type", "type": type_name},
    )


def _drop_none(values: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


# Tools
# ------------------------------------------------------------------------------


@mcp_tool(
    "list_organization_projects_v2",
    "List projects V2 in a GitHub organization using GraphQL API",
    tool_input_schema(
        {
            "org": string_field("Organization name"),
            "first": FIRST,
            "after": AFTER,
            "orderBy": object_schema(
                {
                    "field": enum_field(["CREATED_AT", "UPDATED_AT"]),
                    "direction": enum_field(["ASC", "DESC"]),
                },
                ["field", "direction"],
                description="How to order the projects",
            ),
        },
        ["org"],
    ),
)
@github_operation("list organization projects v2")
async def list_organization_projects_v2(
    client,
    org: str,
    first: Optional[int] = None,
    after: Optional[str] = None,
    orderBy: Optional[Dict[str, str]] = None,
) -> Any:
    variables = {
        "org": org,
        "first": first or DEFAULT_PAGE_SIZE,
        "after": after,
        "orderBy": orderBy,
    }
    data = await client.graphql(LIST_ORGANIZATION_PROJECTS_QUERY, variables)
    return data["organization"]["projectsV2"]


@mcp_tool(
    "get_project_v2",
    "Get details of a GitHub project V2 using GraphQL API",
    tool_input_schema({"id": PROJECT_NODE_ID}, ["id"]),
)
@github_operation("get project v2")
async def get_project_v2(client, id: str) -> Any:
    data = await client.graphql(GET_PROJECT_QUERY, {"id": id})
    return data["node"]


@mcp_tool(
    "create_project_v2",
    "Create a new GitHub project V2 using GraphQL API",
    tool_input_schema(
        {
            "ownerId": string_field("The node ID of the organization or user"),
            "title": string_field("Title of the project"),
            "description": string_field("Description of the project"),
        },
        ["ownerId", "title"],
    ),
)
@github_operation("create project v2")
async def create_project_v2(client, ownerId: str, title: str, description: Optional[str] = None) -> Any:
    variables = {"input": {"ownerId": ownerId, "title": title, "description": description or ""}}
    data = await client.graphql(CREATE_PROJECT_MUTATION, variables)
    return data["createProjectV2"]["projectV2"]


@mcp_tool(
    "update_project_v2",
    "Update a GitHub project V2 using GraphQL API",
    tool_input_schema(
        {
            "projectId": PROJECT_NODE_ID,
            "title": string_field("New title for the project"),
            "description": string_field("New description for the project"),
            "closed": boolean_field("Whether to close the project"),
        },
        ["projectId"],
    ),
)
@github_operation("update project v2")
async def update_project_v2(
    client,
    projectId: str,
    title: Optional[str] = None,
    description: Optional[str] = None,
    closed: Optional[bool] = None,
) -> Any:
    update = _drop_none(
        {
            "projectId": projectId,
            "title": title,
            "shortDescription": description,
            "closed": closed,
        }
    )
    data = await client.graphql(UPDATE_PROJECT_MUTATION, {"input": update})
    return data["updateProjectV2"]["projectV2"]


@mcp_tool(
    "add_item_to_project_v2",
    "Add an issue or pull request to a GitHub project V2 using GraphQL API",
    tool_input_schema(
        {
            "projectId": PROJECT_NODE_ID,
            "contentId": string_field("The node ID of the issue or pull request to add"),
        },
        ["projectId", "contentId"],
    ),
)
@github_operation("add item to project v2")
async def add_item_to_project_v2(client, projectId: str, contentId: str) -> Any:
    data = await client.graphql(ADD_ITEM_MUTATION, {"input": {"projectId": projectId, "contentId": contentId}})
    return data["addProjectV2ItemById"]["item"]


@mcp_tool(
    "list_project_v2_items",
    "List items in a GitHub project V2 using GraphQL API",
    tool_input_schema(
        {"projectId": PROJECT_NODE_ID, "first": FIRST, "after": AFTER},
        ["projectId"],
    ),
)
@github_operation("list project v2 items")
async def list_project_v2_items(
    client,
    projectId: str,
    first: Optional[int] = None,
    after: Optional[str] = None,
) -> Any:
    variables = {"projectId": projectId, "first": first or DEFAULT_PAGE_SIZE, "after": after}
    data = await client.graphql(LIST_ITEMS_QUERY, variables)
    return data["node"]["items"]


@mcp_tool(
    "update_project_v2_item_field",
    "Update a field value for an item in a GitHub project V2 using GraphQL API",
    tool_input_schema(
        {
            "projectId": PROJECT_NODE_ID,
            "itemId": string_field("The node ID of the item"),
            "fieldId": string_field("The node ID of the field"),
            "value": any_field("The new value for the field"),
        },
        ["projectId", "itemId", "fieldId", "value"],
    ),
)
@github_operation("update project v2 item field value")
async def update_project_v2_item_field(client, projectId: str, itemId: str, fieldId: str, value: Any) -> Any:
    field_value = classify_field_value(value)
    variables = {
        "input": {
            "projectId": projectId,
            "itemId": itemId,
            "fieldId": fieldId,
            "value": field_value.to_input(),
        }
    }
    data = await client.graphql(UPDATE_ITEM_FIELD_MUTATION, variables)
    return data["updateProjectV2ItemFieldValue"]["projectV2Item"]
