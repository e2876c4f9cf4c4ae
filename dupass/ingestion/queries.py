"""
GraphQL query documents sent to the identity protection API.

The entity query is parameterized by `$first` (page size), `$after`
(cursor, null on the first page) and `$riskFactors` (risk factor type
filter). Results are sorted by risk score, descending.
"""

ENTITIES_BY_RISK_FACTOR_QUERY = """
query ($after: Cursor, $first: Int, $riskFactors: [RiskFactorType!]) {
  entities(
    riskFactorTypes: $riskFactors
    sortKey: RISK_SCORE
    sortOrder: DESCENDING
    first: $first
    after: $after
  ) {
    pageInfo {
      hasNextPage
      endCursor
    }
    edges {
      node {
        entityId
        primaryDisplayName
        secondaryDisplayName
        type
        riskScore
        archived
        isAdmin: hasRole(type: AdminAccountRole)
        accounts {
          ... on ActiveDirectoryAccountDescriptor {
            passwordAttributes {
              lastChange
            }
          }
        }
        riskFactors {
          type
          score
          severity
          ... on AttackPathBasedRiskFactor {
            attackPath {
              relation
              entity {
                primaryDisplayName
                secondaryDisplayName
              }
              nextEntity {
                primaryDisplayName
                secondaryDisplayName
              }
            }
          }
          ... on DuplicatePasswordRiskEntityFactor {
            groupId
          }
        }
      }
    }
  }
}
"""
