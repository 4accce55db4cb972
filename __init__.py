"""
wxrestore - 微信小程序配置还原工具

功能:
- 从解包后的 app-config.json 还原 app.json (入口页、分包、tabBar)
- 还原 tabBar 内联图标对应的图片路径
- 解析 usingComponents 并补全组件配置
- 从 app-service.js 提取页面/组件的内嵌 json 配置
"""

__version__ = "1.0.0"
