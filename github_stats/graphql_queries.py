"""GraphQL queries used by the stats aggregator."""

REPOSITORY_LIST_QUERY = """
query ($login: String!, $first: Int!, $after: String) {
  rateLimit {
    cost
    remaining
    resetAt
  }
  user(login: $login) {
    repositories(
      first: $first,
      after: $after,
      orderBy: {field: UPDATED_AT, direction: DESC},
      ownerAffiliations: [OWNER, COLLABORATOR, ORGANIZATION_MEMBER],
      affiliations: [OWNER, COLLABORATOR, ORGANIZATION_MEMBER]
    ) {
      nodes {
        ...RepositoryFields
      }
      pageInfo {
        hasNextPage
        endCursor
      }
    }
  }
}

fragment RepositoryFields on Repository {
  nameWithOwner
  isPrivate
  url
  description
  primaryLanguage {
    name
  }
  stargazerCount
  defaultBranchRef {
    target {
      ... on Commit {
        history(first: 0) {
          totalCount
        }
      }
    }
  }
}
"""

CONTRIBUTIONS_QUERY = """
query ($login: String!, $maxRepositories: Int!) {
  rateLimit {
    cost
    remaining
    resetAt
  }
  user(login: $login) {
    contributionsCollection {
      totalCommitContributions
      totalIssueContributions
      totalPullRequestContributions
      totalPullRequestReviewContributions
      commitContributionsByRepository(maxRepositories: $maxRepositories) {
        repository {
          nameWithOwner
          isPrivate
          owner {
            login
          }
        }
        contributions {
          totalCount
        }
      }
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            contributionCount
            date
            weekday
          }
        }
      }
    }
  }
}
"""

__all__ = ["CONTRIBUTIONS_QUERY", "REPOSITORY_LIST_QUERY"]
