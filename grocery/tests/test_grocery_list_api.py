import tempfile
import unittest
from pathlib import Path
from fastapi.testclient import TestClient
from grocery.api.api_run import app, get_registry
from grocery.domain.errors import PersistenceError
from grocery.infra.GroceryList_Repository import JsonFileGroceryListStore
from grocery.logic.shopping.sync_engine import GroceryEngineRegistry

MEALS = [
    {"id": "1", "name": "Tacos", "ingredients": ["Ground beef", "Tortillas", "Salt"]},
    {"id": "2", "name": "Chili", "mainIngredients": ["Ground beef", "Onion", "Salt"]},
]


class BrokenStore(JsonFileGroceryListStore):
    async def upsert_item(self, plan_id, item):
        raise PersistenceError("store unreachable")


class TestGroceryListAPI(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.store = JsonFileGroceryListStore(Path(self._tmp.name) / "lists.json")
        self.registry = GroceryEngineRegistry(self.store)
        app.dependency_overrides[get_registry] = lambda: self.registry
        self.addCleanup(app.dependency_overrides.pop, get_registry, None)
        self.client = TestClient(app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def _regenerate(self, plan_id="week-42"):
        resp = self.client.post(f'/api/grocery-list/{plan_id}/regenerate', json={"meals": MEALS})
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()

    def _item(self, data, name):
        for section in data['sections']:
            for item in section['items']:
                if item['name'] == name:
                    return section['name'], item
        return None, None

    def test_empty_list(self):
        resp = self.client.get('/api/grocery-list/week-1')
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data['id'], 'week-1')
        self.assertEqual(data['sections'], [])
        self.assertEqual(data['progress'], {'checked': 0, 'total': 0})

    def test_regenerate(self):
        data = self._regenerate()
        names = [i['name'] for s in data['sections'] for i in s['items']]
        self.assertEqual(sorted(names), ['Ground beef', 'Onion', 'Salt', 'Tortillas'])
        section, _ = self._item(data, 'Onion')
        self.assertEqual(section, 'Produce')
        # read model serves the same list
        again = self.client.get('/api/grocery-list/week-42').json()
        self.assertEqual(again['sections'], data['sections'])

    def test_regenerate_without_meals(self):
        resp = self.client.post('/api/grocery-list/week-42/regenerate', json={"meals": []})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('error', resp.json())

    def test_add_item_and_validation(self):
        resp = self.client.post('/api/grocery-list/week-42/items', json={"name": "Milk", "quantity": "1 gallon"})
        self.assertEqual(resp.status_code, 200)
        section, milk = self._item(resp.json(), 'Milk')
        self.assertEqual(section, 'Dairy & Eggs')
        self.assertEqual(milk['quantity'], '1 gallon')
        self.assertFalse(milk['isChecked'])

        resp = self.client.post('/api/grocery-list/week-42/items', json={"name": "   "})
        self.assertEqual(resp.status_code, 400)

    def test_check_uncheck_and_remove(self):
        data = self._regenerate()
        _, salt = self._item(data, 'Salt')
        resp = self.client.post(f"/api/grocery-list/week-42/items/{salt['id']}/check")
        self.assertTrue(self._item(resp.json(), 'Salt')[1]['isChecked'])
        self.assertEqual(resp.json()['progress'], {'checked': 1, 'total': 4})

        resp = self.client.post(f"/api/grocery-list/week-42/items/{salt['id']}/uncheck")
        self.assertFalse(self._item(resp.json(), 'Salt')[1]['isChecked'])

        resp = self.client.delete(f"/api/grocery-list/week-42/items/{salt['id']}")
        self.assertIsNone(self._item(resp.json(), 'Salt')[1])
        # unknown ids are ignored
        resp = self.client.delete('/api/grocery-list/week-42/items/unknown')
        self.assertEqual(resp.status_code, 200)
        resp = self.client.post('/api/grocery-list/week-42/items/unknown/check')
        self.assertEqual(resp.status_code, 200)

    def test_reorganize_and_view(self):
        data = self._regenerate()
        _, onion = self._item(data, 'Onion')
        self.client.post(f"/api/grocery-list/week-42/items/{onion['id']}/check")
        resp = self.client.post('/api/grocery-list/week-42/reorganize')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['sections'][-1]['name'], 'Completed Items')

        view = self.client.get('/api/grocery-list/week-42/view').json()
        self.assertEqual([c['name'] for c in view['completed']], ['Onion'])
        self.assertNotIn('Completed Items', [s['name'] for s in view['sections']])

        filtered = self.client.get('/api/grocery-list/week-42/view', params={"search": "beef"}).json()
        self.assertEqual([s['name'] for s in filtered['sections']], ['Meat & Seafood'])

    def test_clear(self):
        self._regenerate()
        resp = self.client.post('/api/grocery-list/week-42/clear')
        self.assertEqual(resp.json()['sections'], [])
        self.assertEqual(self.store.get('week-42').sections, [])

    def test_add_meal(self):
        self._regenerate()
        resp = self.client.post('/api/grocery-list/week-42/add-meal',
                                json={"meal": {"id": "3", "name": "Soup", "ingredients": ["Onion", "Carrot"]}})
        self.assertEqual(resp.status_code, 200)
        names = [i['name'] for s in resp.json()['sections'] for i in s['items']]
        self.assertEqual(names.count('Onion'), 1)
        self.assertIn('Carrot', names)

    def test_export_text_and_pdf(self):
        data = self._regenerate()
        _, salt = self._item(data, 'Salt')
        self.client.post(f"/api/grocery-list/week-42/items/{salt['id']}/check")

        resp = self.client.get('/api/grocery-list/week-42/export.txt', params={"headers": "false"})
        self.assertEqual(resp.status_code, 200)
        lines = resp.text.split('\n')
        self.assertEqual(sorted(lines), ['Ground beef', 'Onion', 'Tortillas'])

        resp = self.client.get('/api/grocery-list/week-42/export.txt', params={"headers": "true"})
        self.assertTrue(resp.text.startswith('MY GROCERY LIST'))

        resp = self.client.get('/api/grocery-list/week-42/export.pdf')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.headers['content-type'], 'application/pdf')

    def test_store_failure_is_503_with_list(self):
        broken = GroceryEngineRegistry(BrokenStore(Path(self._tmp.name) / "broken.json"))
        app.dependency_overrides[get_registry] = lambda: broken
        resp = self.client.post('/api/grocery-list/week-42/items', json={"name": "Milk"})
        self.assertEqual(resp.status_code, 503)
        body = resp.json()
        self.assertIn('store unreachable', body['error'])
        self.assertEqual(body['list']['sections'], [])

    def test_events_feed(self):
        before = self.client.get('/api/grocery-list/events').json()['next_cursor']
        self.client.post('/api/grocery-list/week-9/items', json={"name": "Milk"})
        resp = self.client.get('/api/grocery-list/events', params={"since": before, "plan_id": "week-9"})
        events = resp.json()['events']
        self.assertTrue(any(e['type'] == 'grocery.item_upserted' and e.get('name') == 'Milk' for e in events))

    def test_departments(self):
        departments = self.client.get('/api/departments').json()['departments']
        self.assertIn('Produce', departments)
        self.assertEqual(departments[-1], 'Other')
