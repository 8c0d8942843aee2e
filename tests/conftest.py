import pytest

from engine.vocabulary import PipelineConfig
from scraper.sources.package_page import PackagePage


PACKAGES_HTML = """
<html>
<head><title>بسته‌های اینترنت</title></head>
<body>
<div class="grid">
  <div class="card-templ-wrapper" id="p1">
    <div class="card-template">
      <div class="card-description"><h6>بسته ۳۰ روزه ۳۰ گیگابایت</h6></div>
      <div class="card-price"><span class="fa-number">۹۰۰,۰۰۰</span> تومان</div>
      <div class="card-buy-credit"><button>خرید از اعتبار</button></div>
    </div>
  </div>
  <div class="card-templ-wrapper" id="p2">
    <div class="card-template">
      <div class="card-price"><span class="fa-number">۵۰,۰۰۰</span> تومان</div>
    </div>
  </div>
  <div class="card-templ-wrapper" id="p3">
    <div class="card-template">
      <div class="card-description"><h6>۱۰ گیگ</h6></div>
      <div class="card-price"><span class="fa-number">۲۰۰,۰۰۰</span> تومان</div>
      <div class="card-buy-credit"><button>خرید از اعتبار</button></div>
    </div>
  </div>
  <div class="card-templ-wrapper" id="p4">
    <div class="card-template">
      <div class="card-description"><h6>۵۱۲ مگابایت</h6></div>
      <div class="card-price"><span class="fa-number">۵۰,۰۰۰</span> تومان</div>
    </div>
  </div>
</div>
</body>
</html>
"""


@pytest.fixture
def packages_html():
    return PACKAGES_HTML


@pytest.fixture
def pipeline_config():
    return PipelineConfig()


@pytest.fixture
def log_messages():
    return []


@pytest.fixture
def page(packages_html, pipeline_config, log_messages):
    return PackagePage(packages_html, config=pipeline_config, logger=log_messages.append)
