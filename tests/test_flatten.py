"""Tests for flattening nested menus into an index."""
import pytest

from tree_menu_resolver.errors import CircularReferenceError, DuplicateIdError, InvalidMenuError
from tree_menu_resolver.flatten import flatten
from tree_menu_resolver.ids import new_id, sequential_ids
from tree_menu_resolver.menu import MenuItem, ResolveKind


@pytest.fixture
def sample_menu():
    """Two-level menu mixing parents and actions."""
    return [
        {
            'label': 'Settings',
            'children': [
                {'label': 'Audio', 'resolve': 'AUDIO'},
                {'label': 'Graphics', 'children': [{'label': 'Resolution'}]},
            ],
        },
        {'label': 'Exit', 'resolve': 'EXIT'},
    ]


class TestFlattenOrder:
    """Test node creation order and parent links."""

    def test_preorder_insertion(self, sample_menu):
        """Test nodes are indexed in depth-first pre-order."""
        index = flatten(sample_menu, id_factory=sequential_ids())
        labels = [node.data['label'] for node in index.values()]
        assert labels == ['Settings', 'Audio', 'Graphics', 'Resolution', 'Exit']
        assert list(index) == ['node-1', 'node-2', 'node-3', 'node-4', 'node-5']

    def test_parent_links(self, sample_menu):
        """Test every node points at its enclosing node."""
        index = flatten(sample_menu, id_factory=sequential_ids())
        assert index['node-1'].parent_id is None
        assert index['node-2'].parent_id == 'node-1'
        assert index['node-3'].parent_id == 'node-1'
        assert index['node-4'].parent_id == 'node-3'
        assert index['node-5'].parent_id is None

    def test_parent_chain_depth(self, sample_menu):
        """Test parent links reach the root in as many steps as the depth."""
        index = flatten(sample_menu, id_factory=sequential_ids())
        steps = 0
        current = index['node-4']
        while current.parent_id is not None:
            current = index[current.parent_id]
            steps += 1
        assert steps == 2

    def test_has_children(self, sample_menu):
        """Test has_children is set only for items with children."""
        index = flatten(sample_menu, id_factory=sequential_ids())
        assert index['node-1'].has_children is True
        assert index['node-2'].has_children is False
        assert index['node-3'].has_children is True

    def test_empty_children_list_is_a_leaf(self):
        """Test an explicit empty children list does not make a parent."""
        index = flatten([{'label': 'Node 2', 'resolve': 'x', 'children': []}])
        assert next(iter(index.values())).has_children is False

    def test_very_deep_chain(self):
        """Test a chain far deeper than the interpreter call stack flattens."""
        top = {'label': 'level 0', 'children': []}
        current = top
        for depth in range(1, 5000):
            nxt = {'label': f'level {depth}', 'children': []}
            current['children'].append(nxt)
            current = nxt

        index = flatten([top], id_factory=sequential_ids())
        assert len(index) == 5000
        assert index['node-5000'].data == {'label': 'level 4999'}
        assert index['node-5000'].parent_id == 'node-4999'
        assert index['node-1'].parent_id is None

    def test_siblings_after_deep_branch(self):
        """Test traversal resumes with later siblings after a nested branch."""
        menu = [
            {'label': 'A', 'children': [{'label': 'A1', 'children': [{'label': 'A1a'}]},
                                         {'label': 'A2'}]},
            {'label': 'B'},
        ]
        index = flatten(menu, id_factory=sequential_ids())
        assert [(node.data['label'], node.parent_id) for node in index.values()] == [
            ('A', None), ('A1', 'node-1'), ('A1a', 'node-2'), ('A2', 'node-1'), ('B', None),
        ]

    def test_empty_input(self):
        """Test an empty menu yields an empty index."""
        assert flatten([]) == {}

    def test_menu_must_be_a_list(self):
        """Test a bare mapping is rejected as the menu."""
        with pytest.raises(InvalidMenuError):
            flatten({'label': 'Settings'})

    def test_input_not_mutated(self, sample_menu):
        """Test the caller's definitions are left untouched."""
        flatten(sample_menu, inject_id_key='id')
        assert 'id' not in sample_menu[0]
        assert sample_menu[0]['children'][0] == {'label': 'Audio', 'resolve': 'AUDIO'}


class TestIdentifiers:
    """Test identifier generation."""

    def test_default_ids_are_unique_strings(self, sample_menu):
        """Test the default factory produces distinct string ids."""
        index = flatten(sample_menu)
        assert len(index) == 5
        assert all(isinstance(node_id, str) for node_id in index)

    def test_separate_flattens_mint_fresh_ids(self, sample_menu):
        """Test the same menu flattened twice shares no ids."""
        first = flatten(sample_menu)
        second = flatten(sample_menu)
        assert not set(first) & set(second)

    def test_new_id_is_random(self):
        """Test new_id() does not repeat."""
        assert new_id() != new_id()

    def test_sequential_ids_prefix(self):
        """Test sequential_ids() honours prefix and start."""
        factory = sequential_ids(prefix='item-', start=10)
        assert [factory(), factory()] == ['item-10', 'item-11']

    def test_duplicate_ids_rejected(self, sample_menu):
        """Test a factory repeating an id is reported."""
        with pytest.raises(DuplicateIdError) as exc_info:
            flatten(sample_menu, id_factory=lambda: 'same')
        assert exc_info.value.node_id == 'same'


class TestIdentityInjection:
    """Test merging generated ids into payloads."""

    def test_injects_id(self, sample_menu):
        """Test each payload carries its own id under the key."""
        index = flatten(sample_menu, inject_id_key='myId')
        for node_id, node in index.items():
            assert node.data['myId'] == node_id

    def test_injection_copies_payload(self):
        """Test the injected payload is a copy of the original."""
        payload = {'label': 'Item 1'}
        index = flatten([MenuItem(data=payload, resolve='action1')], inject_id_key='id')
        node = next(iter(index.values()))
        assert dict(node.data) == {'label': 'Item 1', 'id': node.id}
        assert payload == {'label': 'Item 1'}

    def test_injection_without_payload(self):
        """Test a missing payload becomes a mapping with only the id."""
        index = flatten([{'resolve': 'action1'}], inject_id_key='myId')
        node = next(iter(index.values()))
        assert dict(node.data) == {'myId': node.id}

    def test_injected_payload_is_frozen(self):
        """Test the stored payload refuses writes."""
        index = flatten([{'label': 'Item 1'}], inject_id_key='id')
        node = next(iter(index.values()))
        with pytest.raises(TypeError):
            node.data['id'] = 'other'

    def test_no_injection_by_default(self):
        """Test payloads pass through unmodified without the option."""
        payload = {'label': 'Item 1'}
        index = flatten([MenuItem(data=payload)])
        assert next(iter(index.values())).data is payload

    def test_missing_payload_stays_none(self):
        """Test an absent payload stays None without injection."""
        index = flatten([MenuItem(resolve='x')])
        assert next(iter(index.values())).data is None

    def test_non_mapping_payload_cannot_take_id(self):
        """Test injecting into a string payload is rejected."""
        with pytest.raises(InvalidMenuError):
            flatten([MenuItem(data='Settings')], inject_id_key='id')


class TestResolveWrapping:
    """Test how resolve values are stored."""

    def test_static_and_none(self, sample_menu):
        """Test tokens are kept and absent resolves are tagged NONE."""
        index = flatten(sample_menu, id_factory=sequential_ids())
        assert index['node-1'].resolve.kind is ResolveKind.NONE
        assert index['node-2'].resolve.kind is ResolveKind.STATIC
        assert index['node-2'].resolve.value == 'AUDIO'

    def test_callback_wrapped_with_node_id(self):
        """Test wrap_callback receives the owning node's id."""
        seen = []

        def wrap(node_id, callback):
            return lambda: callback(node_id)

        index = flatten([MenuItem(resolve=lambda arg: seen.append(arg) or 'done')],
                        id_factory=sequential_ids(), wrap_callback=wrap)
        assert index['node-1'].resolve() == 'done'
        assert seen == ['node-1']


class TestCircularReferences:
    """Test cycle detection."""

    def test_two_node_cycle(self):
        """Test a child that refers back to its parent is detected."""
        node1 = MenuItem(data={'label': 'Node 1'}, children=[])
        node2 = MenuItem(data={'label': 'Node 2'}, children=[])
        node1.children.append(node2)
        node2.children.append(node1)

        with pytest.raises(CircularReferenceError, match='Circular reference detected') as exc_info:
            flatten([node1])
        assert exc_info.value.cycle == ('0', '0.0', '0')

    def test_self_reference(self):
        """Test an item listing itself as a child is detected."""
        node = {'label': 'Loop', 'children': []}
        node['children'].append(node)
        with pytest.raises(CircularReferenceError) as exc_info:
            flatten([{'label': 'Top'}, node])
        assert exc_info.value.cycle == ('1', '1')

    def test_deep_cycle_is_not_a_recursion_error(self):
        """Test a cycle below a long chain still fails with a cycle error."""
        top = {'label': 'level 0', 'children': []}
        current = top
        for depth in range(1, 50):
            nxt = {'label': f'level {depth}', 'children': []}
            current['children'].append(nxt)
            current = nxt
        current['children'].append(top)
        with pytest.raises(CircularReferenceError) as exc_info:
            flatten([top])
        assert len(exc_info.value.cycle) == 51

    def test_shared_subtree_is_not_a_cycle(self):
        """Test the same item under two parents is flattened twice."""
        shared = {'label': 'Shared'}
        menu = [
            {'label': 'A', 'children': [shared]},
            {'label': 'B', 'children': [shared]},
        ]
        index = flatten(menu, id_factory=sequential_ids())
        labels = [node.data['label'] for node in index.values()]
        assert labels == ['A', 'Shared', 'B', 'Shared']
