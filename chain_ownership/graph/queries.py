"""GraphQL query text for the subgraphs the client reads."""

ITEM_TYPES = '["wearable_v1", "wearable_v2", "smart_wearable_v1", "emote_v1"]'

# ---------------------------------------------------------------------------
# Pinned to a block height
# ---------------------------------------------------------------------------

NAMES_FOR_OWNER_AT_BLOCK = """
query getNamesForOwnerAtBlock($block: Int!, $owner: String!, $names: [String!], $first: Int!, $skip: Int!) {
  nfts(
    block: {number: $block}
    where: {owner_: {address: $owner}, category: ens, name_in: $names}
    first: $first
    skip: $skip
    orderBy: id
  ) {
    name
  }
}"""

ANY_NAME_FOR_OWNER_AT_BLOCK = """
query getAnyNameForOwnerAtBlock($block: Int!, $owner: String!) {
  nfts(
    block: {number: $block}
    where: {owner_: {address: $owner}, category: ens}
    first: 1
  ) {
    name
  }
}"""

ITEMS_FOR_OWNER_AT_BLOCK = f"""
query getItemsForOwnerAtBlock($block: Int!, $owner: String!, $urns: [String!], $first: Int!, $skip: Int!) {{
  nfts(
    block: {{number: $block}}
    where: {{owner_: {{address: $owner}}, searchItemType_in: {ITEM_TYPES}, urn_in: $urns}}
    first: $first
    skip: $skip
    orderBy: id
  ) {{
    urn
  }}
}}"""

# ---------------------------------------------------------------------------
# Latest block
# ---------------------------------------------------------------------------

NAMES_FOR_OWNERS = """
query getNamesForOwners($owners: [String!], $names: [String!], $first: Int!, $skip: Int!) {
  nfts(
    where: {owner_: {address_in: $owners}, category: ens, name_in: $names}
    first: $first
    skip: $skip
    orderBy: id
  ) {
    name
    owner {
      address
    }
  }
}"""

ITEMS_FOR_OWNERS = f"""
query getItemsForOwners($owners: [String!], $urns: [String!], $first: Int!, $skip: Int!) {{
  nfts(
    where: {{owner_: {{address_in: $owners}}, searchItemType_in: {ITEM_TYPES}, urn_in: $urns}}
    first: $first
    skip: $skip
    orderBy: id
  ) {{
    urn
    owner {{
      address
    }}
  }}
}}"""

OWNERS_BY_NAME = """
query getOwnersByName($names: [String!], $first: Int!, $skip: Int!) {
  nfts(
    where: {category: ens, name_in: $names}
    first: $first
    skip: $skip
    orderBy: id
  ) {
    name
    owner {
      address
    }
  }
}"""

COLLECTIONS = """
query getCollections($first: Int!, $skip: Int!) {
  collections(first: $first, skip: $skip, orderBy: urn, orderDirection: asc) {
    name
    urn
  }
}"""

THIRD_PARTIES = """
query getThirdParties($first: Int!, $skip: Int!) {
  thirdParties(where: {isApproved: true}, first: $first, skip: $skip, orderBy: id) {
    id
    metadata {
      thirdParty {
        name
        description
      }
    }
  }
}"""

# ---------------------------------------------------------------------------
# Blocks subgraph
# ---------------------------------------------------------------------------

# ``after`` is empty while the indexer has not reached the timestamp yet.
BLOCK_FOR_TIMESTAMP = """
query getBlockForTimestamp($timestamp: BigInt!) {
  before: blocks(
    where: {timestamp_lte: $timestamp}
    first: 1
    orderBy: timestamp
    orderDirection: desc
  ) {
    number
    timestamp
  }
  after: blocks(
    where: {timestamp_gte: $timestamp}
    first: 1
    orderBy: timestamp
    orderDirection: asc
  ) {
    number
  }
}"""
