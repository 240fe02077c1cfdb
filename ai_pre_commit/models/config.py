"""配置数据模型"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_EXTENSIONS = [".html", ".js", ".jsx", ".ts", ".tsx", ".vue", ".java", ".rs", ".py"]


class LLMConfig(BaseModel):
    """LLM 提供商配置"""

    model_config = ConfigDict(frozen=True, extra="ignore")

    model: str = Field(default="deepseek-chat", description="模型名称")
    api_key: str = Field(default="", description="API Key，为空时不发送 Authorization 头")
    base_url: str = Field(
        default="https://api.deepseek.com/v1",
        description="OpenAI 兼容接口地址，末尾斜杠可有可无",
    )
    timeout: Optional[float] = Field(None, description="请求超时（秒），为空则不限制")


class ReviewConfig(BaseModel):
    """评审配置，加载后不可修改"""

    model_config = ConfigDict(frozen=True, extra="ignore")

    llm: LLMConfig = Field(default_factory=LLMConfig, description="LLM 配置")
    max_diff_size: int = Field(
        default=4000, gt=0, description="发送给模型的 diff 最大字节数，超出部分截断"
    )
    language: str = Field(default="chinese", description="问题描述和修复建议使用的语言")
    check_security: bool = Field(default=True, description="启用安全性视角")
    check_performance: bool = Field(default=True, description="启用性能视角")
    check_style: bool = Field(default=False, description="启用代码风格视角")
    check_database: bool = Field(default=True, description="启用数据库视角")
    enabled_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="只评审这些后缀的文件（区分大小写）",
    )
    output_file: Optional[str] = Field(None, description="可选的评审日志文件路径")

    @field_validator("enabled_extensions", mode="before")
    @classmethod
    def split_extensions(cls, value):
        """支持逗号分隔的字符串写法，如 ".py,.rs" """
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            return [str(v).strip() for v in value if str(v).strip()]
        return value
