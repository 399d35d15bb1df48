"""Shared test fixtures."""

import os

import pytest


# ── Sample TypeScript Content ────────────────────────────────────────────

ROUTES_TS = """\
import { NgModule } from '@angular/core';
import { RouterModule, Routes } from '@angular/router';

import { DetailComponent } from './detail/detail.component';
import { HomeComponent } from './home/home.component';
import { ListComponent } from './list/list.component';
import { LoginComponent } from './login/login.component';

const routes: Routes = [
  { path: 'home', component: HomeComponent },
  { path: 'items', component: ListComponent, children: [
    { path: ':id', component: DetailComponent },
  ]},
  { path: 'login', component: LoginComponent },
  { path: '', redirectTo: '/home', pathMatch: 'full' },
];

@NgModule({
  imports: [RouterModule.forRoot(routes)],
  exports: [RouterModule],
})
export class AppModule {}
"""

HOME_COMPONENT_TS = """\
import { Component } from '@angular/core';
import { Router } from '@angular/router';

@Component({
  selector: 'app-home',
  templateUrl: './home.component.html',
})
export class HomeComponent {
  firstId = 1;

  constructor(private router: Router) {}

  openFirst(): void {
    this.router.navigate(['/items', this.firstId]);
  }
}
"""

HOME_COMPONENT_HTML = """\
<h1>Home</h1>
<button (click)="openFirst()">Open</button>
<app-item-list></app-item-list>
"""

LIST_COMPONENT_TS = """\
import { Component } from '@angular/core';

@Component({
  selector: 'app-item-list',
  template: `
    <a *ngFor="let item of items" [routerLink]="['/items', item.id]">{{ item.name }}</a>
    <button type="button" (click)="reload()">Reload</button>
  `,
})
export class ListComponent {
  items: Item[] = [];

  constructor(private itemService: ItemService) {}

  reload = () => this.itemService.load();
}
"""

DETAIL_COMPONENT_TS = """\
import { Component } from '@angular/core';
import { Location } from '@angular/common';

@Component({
  selector: 'app-item-detail',
  template: '<button id="back-button" (click)="back()">Back</button>',
})
export class DetailComponent {
  constructor(private location: Location) {}

  back() {
    this.location.back();
  }
}
"""

LOGIN_COMPONENT_TS = """\
import { Component } from '@angular/core';
import { FormBuilder, Validators } from '@angular/forms';
import { Router } from '@angular/router';

@Component({
  selector: 'app-login',
  templateUrl: './login.component.html',
})
export class LoginComponent {
  loginForm = this.fb.group({
    email: ['', [Validators.required, Validators.email]],
    password: ['', Validators.required],
    remember: [false],
  });

  constructor(private fb: FormBuilder, private authService: AuthService, private router: Router) {}

  submit(): void {
    this.authService.login(this.loginForm.value);
    this.router.navigate(['/home']);
  }
}
"""

LOGIN_COMPONENT_HTML = """\
<form [formGroup]="loginForm" (ngSubmit)="submit()">
  <input formControlName="email" type="email" placeholder="Email">
  <input formControlName="password" type="password" required>
  <mat-checkbox formControlName="remember">Remember me</mat-checkbox>
  <button type="submit">Sign in</button>
</form>
"""

BROKEN_COMPONENT_TS = """\
import { Component } from '@angular/core';

@Component({
  selector: 'app-broken',
  templateUrl: './missing.component.html',
})
export class BrokenComponent {}
"""

TSCONFIG_JSON = """\
{
  // Angular application sources
  "compilerOptions": {
    "strict": true,
  },
  "include": ["src/**/*.ts"],
  "exclude": ["src/**/*.spec.ts"],
}
"""

TSCONFIG_APP_JSON = """\
{
  "extends": "./tsconfig.json",
  "files": ["src/main.ts"],
  "include": ["src/**/*.d.ts"],
}
"""

MAIN_TS = """\
import { platformBrowserDynamic } from '@angular/platform-browser-dynamic';
import { AppModule } from './app/app.module';

platformBrowserDynamic().bootstrapModule(AppModule);
"""

PROJECT_FILES = {
    'tsconfig.json': TSCONFIG_JSON,
    'tsconfig.app.json': TSCONFIG_APP_JSON,
    'src/main.ts': MAIN_TS,
    'src/app/app.module.ts': ROUTES_TS,
    'src/app/home/home.component.ts': HOME_COMPONENT_TS,
    'src/app/home/home.component.html': HOME_COMPONENT_HTML,
    'src/app/list/list.component.ts': LIST_COMPONENT_TS,
    'src/app/detail/detail.component.ts': DETAIL_COMPONENT_TS,
    'src/app/login/login.component.ts': LOGIN_COMPONENT_TS,
    'src/app/login/login.component.html': LOGIN_COMPONENT_HTML,
}


# ── Fixtures ─────────────────────────────────────────────────────────────

@pytest.fixture
def tmp_source(tmp_path):
    """Write source content to a temp file and return its path."""
    def _write(content: str, filename: str = "test.component.ts") -> str:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def angular_project(tmp_path):
    """Create a minimal Angular project and return its tsconfig path."""
    root = tmp_path / "project"
    for relative, content in PROJECT_FILES.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return str(root / 'tsconfig.json')


@pytest.fixture
def add_project_file(angular_project):
    """Add a file to the sample project, relative to its root."""
    root = os.path.dirname(angular_project)

    def _add(relative: str, content: str) -> str:
        path = os.path.join(root, relative)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path
    return _add
