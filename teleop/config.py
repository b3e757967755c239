from pydantic import BaseModel, Field, model_validator

from teleop.messages import CommandEncoding, EnablePolicy, InputShape


class ServerConfig(BaseModel):
    """Настройки веб-сервера"""
    host: str = Field("0.0.0.0", description="Адрес для привязки сервера")
    port: int = Field(8000, ge=1, le=65535, description="Порт сервера")
    reload: bool = Field(False, description="Auto-reload при изменении кода (для разработки)")


class SpeedMode(BaseModel):
    """Один дискретный режим скорости"""
    label: str = Field(..., min_length=1, description="Название режима для телеметрии")
    multiplier: float = Field(..., gt=0.0, le=1.0, description="Множитель максимальной скорости")


DEFAULT_SPEED_MODES = [
    SpeedMode(label="Slow (50%)", multiplier=0.5),
    SpeedMode(label="Normal (80%)", multiplier=0.8),
    SpeedMode(label="Fast (100%)", multiplier=1.0),
]


class GamepadConfig(BaseModel):
    """Настройки геймпада и сессии управления"""
    # Политика включения выбирается явно: toggle и dead-man не взаимозаменяемы
    enable_policy: EnablePolicy = Field(..., description="toggle - фиксация нажатием, deadman - только пока кнопка удерживается")
    input_shape: InputShape = Field(InputShape.SINGLE_STICK, description="Схема ввода: один стик или два триггера")

    # Оси
    stick_x_axis: int = Field(0, ge=0, description="Ось стика для поворота")
    stick_y_axis: int = Field(1, ge=0, description="Ось стика вперёд/назад (вверх = отрицательное значение)")
    forward_trigger_axis: int = Field(5, ge=0, description="Ось триггера движения вперёд")
    backward_trigger_axis: int = Field(2, ge=0, description="Ось триггера движения назад")
    triggers_signed: bool = Field(True, description="Триггер сообщает -1..1 (покой = -1), а не 0..1")

    # Кнопки
    cycle_button: int = Field(4, ge=0, description="Кнопка переключения режима скорости")
    enable_button: int = Field(5, ge=0, description="Кнопка включения/dead-man")

    # Мёртвые зоны
    stick_deadzone: float = Field(0.15, ge=0.0, lt=1.0, description="Мёртвая зона осей стика")
    trigger_deadzone: float = Field(0.05, ge=0.0, lt=1.0, description="Мёртвая зона триггеров")

    # Режимы скорости
    speed_modes: list[SpeedMode] = Field(default_factory=lambda: list(DEFAULT_SPEED_MODES), description="Режимы скорости по порядку переключения")
    initial_speed_mode: int = Field(1, ge=0, description="Индекс режима скорости при старте сессии")

    # Частота опроса
    tick_interval_s: float = Field(1 / 60, ge=0.005, le=0.1, description="Период опроса геймпада")

    @model_validator(mode="after")
    def _check_layout(self) -> "GamepadConfig":
        if not self.speed_modes:
            raise ValueError("at least one speed mode is required")
        if self.initial_speed_mode >= len(self.speed_modes):
            raise ValueError(
                f"initial_speed_mode {self.initial_speed_mode} is out of range "
                f"for {len(self.speed_modes)} speed modes"
            )
        if self.cycle_button == self.enable_button:
            raise ValueError("cycle_button and enable_button must be different buttons")
        if (
            self.input_shape == InputShape.TRIGGERS
            and self.forward_trigger_axis == self.backward_trigger_axis
        ):
            raise ValueError("triggers input shape needs two distinct trigger axes")
        return self


class DispatchConfig(BaseModel):
    """Настройки отправки команд на ровер"""
    send_interval_s: float = Field(0.1, ge=0.01, le=1.0, description="Минимальный интервал между отправками")
    idle_delay_s: float = Field(0.5, gt=0.0, le=5.0, description="Задержка перед отправкой нулевой команды после отпускания")
    encoding: CommandEncoding = Field(CommandEncoding.SPEED_TURN, description="Формат команды: speed/turn или оси + кнопки")
    announce_enable_actions: bool = Field(True, description="Отправлять start/stop при включении/выключении")

    @model_validator(mode="after")
    def _check_timers(self) -> "DispatchConfig":
        if self.idle_delay_s <= self.send_interval_s:
            raise ValueError("idle_delay_s must be longer than send_interval_s")
        return self


class RobotConfig(BaseModel):
    """Адрес и таймауты ровера"""
    base_url: str = Field("http://192.168.4.1", description="Адрес точки доступа ровера")
    request_timeout_s: float = Field(1.0, gt=0.0, le=10.0, description="Таймаут одного запроса")


class Config(BaseModel):
    """Главная конфигурация приложения"""
    server: ServerConfig = ServerConfig()
    gamepad: GamepadConfig = GamepadConfig(enable_policy=EnablePolicy.TOGGLE)
    dispatch: DispatchConfig = DispatchConfig()
    robot: RobotConfig = RobotConfig()

    @model_validator(mode="after")
    def _check_encoding(self) -> "Config":
        # Оси + кнопки передают только стик, схема с триггерами так не кодируется
        if (
            self.dispatch.encoding == CommandEncoding.AXES_BUTTONS
            and self.gamepad.input_shape == InputShape.TRIGGERS
        ):
            raise ValueError("axes_buttons encoding cannot carry the triggers input shape")
        return self


# Глобальный экземпляр конфигурации
config = Config()
