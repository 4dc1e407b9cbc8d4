"""Root GraphQL schema."""

import graphene

from .importing.schema import ImportMutations, ImportQuery


class Query(ImportQuery, graphene.ObjectType):
    pass


class Mutation(ImportMutations, graphene.ObjectType):
    pass


schema = graphene.Schema(query=Query, mutation=Mutation)
