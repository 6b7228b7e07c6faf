import logging
from enum import Enum, auto


class ChunkPhase(Enum):
    '''Enum to state the actual phase of a chunk'''
    INIT      = 0
    RELAYOUTING = auto()
    PACKING   = auto()
    UNPACKING = auto()
    DONE      = auto()


def get_root_from_chunk(instance):
    father = instance

    while father.father is not None:
        father = father.father

    return father


class Dependency:
    '''This makes the relation between fields possible.

    The relation is defined in one direction (for unpacking) and
    is reversed during the setting of a value. In practice this class
    allows to write something like

        class Simple(Chunk):
            length = fields.StructField('I')
            data = fields.StringField(Dependency('.length'))

    and have the (internal) length of the string contained in the field named 'data'
    strictly connected to the field named 'length': reading 'data' consumes
    'length' bytes and setting a new value to 'data' rewrites 'length'.

    The expression is resolved like a python module path: a leading '.'
    means we start from the father of the field, otherwise we start
    from the root chunk.
    '''
    def __init__(self, expression):
        self.expression = expression
        self.logger = logging.getLogger(__name__)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    def resolve_field(self, instance):
        self.logger.debug('trying to resolve \'%s\' for \'%s\'' % (
            self.expression,
            instance.__class__.__name__,
        ))

        # '.length'.split(".") -> ['', 'length']
        # 'length'.split(".") -> ['length']
        fields_path = self.expression.split('.')

        if fields_path[0] != '':
            field = get_root_from_chunk(instance)
            self.logger.debug(' resolve from root: \'%s\'' % field.__class__.__name__)
        else:  # we have a relative dependency
            field = instance.father
            self.logger.debug(' resolve from father: \'%s\'' % field.__class__.__name__)
            fields_path = fields_path[1:]  # skip the first one that is empty

        for component_name in fields_path:
            field = getattr(field, component_name)

        return field

    def resolve(self, instance):
        '''With this method we resolve the attribute with respect to the instance
        passed as argument.'''
        value = self.resolve_field(instance).value

        self.logger.debug(' resolved with value %s' % value)

        return value

    def resolve_and_set(self, instance, value):
        real_field = self.resolve_field(instance)
        if not hasattr(real_field, 'value'):
            raise ValueError('something is wrong with the Dependency resolution!')
        real_field.value = value


class PropertyDescriptor(object):
    """This the glue for dependency management: an attribute of a field
    that can be a plain value or a Dependency to be resolved at access time."""

    def __init__(self, name: str, _type: type):
        self.name = name
        self.type = _type
        # cache the value when there is no father
        self.cache_name = f'_{name}_cache'

    def __get__(self, instance, owner):
        if instance is None:
            return self

        data = instance.__dict__
        if self.name not in data:
            raise AttributeError(f"no '{self.name}' here!")

        value = data[self.name]

        if isinstance(value, Dependency):
            if instance.father is None:
                return data.get(self.cache_name)

            return value.resolve(instance)

        return value

    def __set__(self, instance, value):
        if not isinstance(value, (self.type, Dependency)):
            raise ValueError(f"A property must be of type {self.type} or a Dependency")

        data = instance.__dict__

        # this is the old stored value
        attribute = data.get(self.name)

        if not isinstance(attribute, Dependency):
            data[self.name] = value
            return

        # not attached to a chunk yet, remember for later
        if instance.father is None:
            data[self.cache_name] = value
            return

        attribute.resolve_and_set(instance, value)
