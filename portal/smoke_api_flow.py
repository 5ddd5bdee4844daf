"""Walk a running API through login, a department edit and logout.

    uvicorn portal.main:app
    python -m portal.smoke_api_flow
"""

import os

import requests

API = os.getenv("PORTAL_API", "http://127.0.0.1:8000")


def main():
    s = requests.Session()

    print('Logging in as the seeded admin...')
    resp = s.post(f'{API}/login', json={'email': 'admin@example.com', 'password': 'Password123!'})
    print('Login status:', resp.status_code, resp.json().get('notices'))

    print('Opening departments...')
    resp = s.post(f'{API}/navigate', json={'fragment': '#/departments'})
    state = resp.json()
    print('Active page:', state.get('activePage'))
    for row in (state.get('view') or {}).get('rows', []):
        print(f"  {row['id']}: {row['name']} - {row['description']}")

    print('Adding a department...')
    resp = s.post(f'{API}/departments', json={'name': 'Finance', 'description': 'Payroll and budgets'})
    print('Create status:', resp.status_code, resp.json().get('outcome'))

    print('Logging out...')
    resp = s.post(f'{API}/logout')
    print('Logout status:', resp.status_code, resp.json().get('fragment'))


if __name__ == "__main__":
    main()
