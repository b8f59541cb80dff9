"""GraphQL documents sent to the Hashnode API."""

POST_FIELDS = """
    id
    title
    slug
    url
    brief
    publishedAt
    updatedAt
"""

CREATE_POST_MUTATION = (
    """
mutation PublishPost($input: PublishPostInput!) {
  publishPost(input: $input) {
    post {"""
    + POST_FIELDS
    + """    }
  }
}
"""
)

UPDATE_POST_MUTATION = (
    """
mutation UpdatePost($input: UpdatePostInput!) {
  updatePost(input: $input) {
    post {"""
    + POST_FIELDS
    + """    }
  }
}
"""
)

DELETE_POST_MUTATION = (
    """
mutation RemovePost($input: RemovePostInput!) {
  removePost(input: $input) {
    post {"""
    + POST_FIELDS
    + """    }
  }
}
"""
)

SCHEDULE_POST_MUTATION = """
mutation ScheduleDraft($input: ScheduleDraftInput!) {
  scheduleDraft(input: $input) {
    scheduledPost {
      id
      scheduledDate
      draft {
        id
        title
        slug
      }
    }
  }
}
"""

GET_POST_QUERY = (
    """
query Post($id: ID!) {
  post(id: $id) {"""
    + POST_FIELDS
    + """  }
}
"""
)

GET_PUBLICATION_QUERY = """
query Publication($host: String!) {
  publication(host: $host) {
    id
    title
    displayTitle
    url
    posts(first: 1) {
      totalDocuments
    }
  }
}
"""
