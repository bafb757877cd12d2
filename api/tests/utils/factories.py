#!/usr/bin/env python3

import factory


class ElementSpecFactory(factory.DictFactory):
    """Factory for SysML element specs"""

    id = factory.Sequence(lambda n: f"element-{n:03d}")
    name = factory.Sequence(lambda n: f"Element {n}")
    description = factory.Faker("sentence")


class PartDefinitionSpecFactory(ElementSpecFactory):
    """Factory for part-definition specs with attributes and ports"""

    attributes = factory.LazyFunction(lambda: [{"name": "mass", "type": "Real"}])
    ports = factory.LazyFunction(lambda: [{"name": "power", "direction": "in"}])


class StateSpecFactory(ElementSpecFactory):
    """Factory for state-definition specs"""

    entryAction = factory.LazyFunction(lambda: {"actionId": "init", "name": "Initialize"})
    exitAction = "cleanup()"
    internalTransitions = factory.LazyFunction(lambda: [{"trigger": "tick", "effect": "count++"}])


class RelationshipSpecFactory(factory.DictFactory):
    """Factory for relationship specs"""

    id = factory.Sequence(lambda n: f"rel-{n:03d}")
    type = "dependency"
    source = "element-a"
    target = "element-b"
    label = factory.Faker("word")
