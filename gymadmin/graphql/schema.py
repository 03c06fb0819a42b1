import strawberry

from gymadmin.graphql.class_instances.mutations import ClassInstanceMutations
from gymadmin.graphql.class_instances.queries import ClassInstanceQueries
from gymadmin.graphql.class_schedules.mutations import ClassScheduleMutations
from gymadmin.graphql.class_schedules.queries import ClassScheduleQueries
from gymadmin.graphql.memberships.mutations import MembershipMutation
from gymadmin.graphql.memberships.queries import MembershipQuery


@strawberry.type
class Query(ClassScheduleQueries, ClassInstanceQueries, MembershipQuery):
    pass


@strawberry.type
class Mutation(ClassScheduleMutations, ClassInstanceMutations, MembershipMutation):
    pass


schema = strawberry.Schema(query=Query, mutation=Mutation)
